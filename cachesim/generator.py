"""Access-event streams built from synthetic distributions or trace files."""

from __future__ import annotations

import itertools
import logging
import random
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from cachesim.events import AccessEvent
from cachesim.parsers import ParseError, UnknownTraceFormatError, new_parser
from cachesim.reader import open_trace
from cachesim.zipf import Zipf

ZIPF_TYPE = "zipf"
FILE_TYPE = "file"

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FilePath:
    """A trace file together with the name of its format."""

    trace_type: str
    path: str


def limited(events: Iterable[AccessEvent], limit: int | None) -> Iterator[AccessEvent]:
    """Yield at most ``limit`` events; ``None`` means no limit."""
    if limit is None:
        return iter(events)
    return itertools.islice(events, limit)


def generate_zipf(
    s: float,
    v: float,
    imax: int,
    limit: int | None = None,
    seed: int | None = None,
) -> Iterator[AccessEvent]:
    """Return a stream of events whose keys follow a Zipf distribution."""
    zipf = Zipf(s, v, imax, random.Random(seed))
    events = iter(lambda: AccessEvent(zipf.uint64()), None)
    return limited(events, limit)


def _file_events(paths: Sequence[FilePath]) -> Iterator[AccessEvent]:
    for file_path in paths:
        try:
            stream = open_trace(file_path.path)
        except OSError as exc:
            logger.error("create file reader: %s", exc)
            return
        with stream:
            try:
                events = new_parser(file_path.trace_type, stream)
            except UnknownTraceFormatError as exc:
                logger.error("create file reader: %s", exc)
                return
            try:
                yield from events
            except (ParseError, OSError) as exc:
                logger.error("%s", exc)
                return


def generate_file(
    paths: Iterable[FilePath], limit: int | None = None
) -> Iterator[AccessEvent]:
    """Yield the events of each trace file in turn.

    A file that cannot be opened or parsed is logged and ends the stream.
    """
    events = _file_events(list(paths))
    try:
        yield from limited(events, limit)
    finally:
        events.close()