"""Cache access events produced by trace sources."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AccessEvent:
    """A single request for a key in a cache trace."""

    key: int