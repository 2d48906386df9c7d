"""Parsers that turn trace files of various formats into access events."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import IO, Any

from cachesim.events import AccessEvent

ARC_FORMAT = "arc"
LIRS_FORMAT = "lirs"
ORACLE_GENERAL_FORMAT = "oracleGeneral"
LIBCACHESIM_CSV_FORMAT = "libcachesimCSV"
SCARAB_FORMAT = "scarab"
CORDA_FORMAT = "corda"

INVALID_FORMAT = "invalid trace format"

_UINT64_MAX = (1 << 64) - 1
_ORACLE_RECORD_SIZE = 24


class ParseError(Exception):
    """Raised when a trace cannot be read or does not match its format."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"parse: {reason}")
        self.reason = reason


class UnknownTraceFormatError(ValueError):
    """Raised when a trace format name is not recognised."""

    def __init__(self, trace_format: str | None = None) -> None:
        super().__init__("unknown trace format")
        self.trace_format = trace_format


def is_available_format(trace_format: str) -> bool:
    """Return whether ``trace_format`` names a supported trace format."""
    return trace_format in _PARSERS


def _parse_uint(text: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise ParseError(f"invalid syntax: {text!r}")
    value = int(text)
    if value > _UINT64_MAX:
        raise ParseError(f"value out of range: {text!r}")
    return value


def _lines(stream: IO[Any]) -> Iterator[str]:
    """Yield lines without their terminators, as a line scanner would."""
    try:
        for raw in stream:
            if isinstance(raw, bytes):
                raw = raw.rstrip(b"\n").removesuffix(b"\r")
                try:
                    yield raw.decode("utf-8")
                except UnicodeDecodeError as exc:
                    raise ParseError(str(exc)) from exc
            else:
                yield raw.rstrip("\n").removesuffix("\r")
    except (OSError, EOFError) as exc:
        raise ParseError(str(exc)) from exc


def _read_full(stream: IO[bytes], size: int) -> bytes:
    parts: list[bytes] = []
    remaining = size
    try:
        while remaining:
            chunk = stream.read(remaining)
            if not chunk:
                break
            parts.append(chunk)
            remaining -= len(chunk)
    except (OSError, EOFError) as exc:
        raise ParseError(str(exc)) from exc
    return b"".join(parts)


def _records(stream: IO[bytes], size: int) -> Iterator[bytes]:
    while True:
        record = _read_full(stream, size)
        if not record:
            return
        if len(record) < size:
            raise ParseError("unexpected EOF")
        yield record


def parse_arc(stream: IO[Any]) -> Iterator[AccessEvent]:
    """Parse an ARC trace: lines of ``start count _ _`` expanding to a key range."""
    for line in _lines(stream):
        fields = line.split()
        if len(fields) != 4:
            raise ParseError(INVALID_FORMAT)
        start = _parse_uint(fields[0])
        count = _parse_uint(fields[1])
        for offset in range(count):
            yield AccessEvent((start + offset) & _UINT64_MAX)


def parse_lirs(stream: IO[Any]) -> Iterator[AccessEvent]:
    """Parse a LIRS trace: one key per line; a blank line ends the trace."""
    for line in _lines(stream):
        line = line.strip()
        if not line:
            return
        yield AccessEvent(_parse_uint(line))


def parse_corda(stream: IO[bytes]) -> Iterator[AccessEvent]:
    """Parse a Corda trace: consecutive big-endian 64-bit keys."""
    for record in _records(stream, 8):
        yield AccessEvent(int.from_bytes(record, "big"))


def parse_scarab(stream: IO[bytes]) -> Iterator[AccessEvent]:
    """Parse a Scarab trace: consecutive big-endian 64-bit keys."""
    for record in _records(stream, 8):
        yield AccessEvent(int.from_bytes(record, "big"))


def parse_oracle_general(stream: IO[bytes]) -> Iterator[AccessEvent]:
    """Parse an oracleGeneral trace of 24-byte little-endian records.

    Each record holds a 32-bit timestamp, a 64-bit object id, a 32-bit size
    and a 64-bit next access time; only the object id is used.
    """
    for record in _records(stream, _ORACLE_RECORD_SIZE):
        yield AccessEvent(int.from_bytes(record[4:12], "little"))


def parse_libcachesim_csv(stream: IO[Any]) -> Iterator[AccessEvent]:
    """Parse a libCacheSim CSV trace, skipping the header line."""
    lines = _lines(stream)
    if next(lines, None) is None:
        return
    for line in lines:
        fields = line.split(",")
        if len(fields) != 4:
            raise ParseError(INVALID_FORMAT)
        yield AccessEvent(_parse_uint(fields[1].strip()))


_PARSERS: dict[str, Callable[[IO[Any]], Iterator[AccessEvent]]] = {
    ARC_FORMAT: parse_arc,
    LIRS_FORMAT: parse_lirs,
    ORACLE_GENERAL_FORMAT: parse_oracle_general,
    LIBCACHESIM_CSV_FORMAT: parse_libcachesim_csv,
    SCARAB_FORMAT: parse_scarab,
    CORDA_FORMAT: parse_corda,
}


def new_parser(trace_type: str, stream: IO[Any]) -> Iterator[AccessEvent]:
    """Return an iterator of events read from ``stream`` in the given format."""
    try:
        parse = _PARSERS[trace_type]
    except KeyError:
        raise UnknownTraceFormatError(trace_type) from None
    return parse(stream)