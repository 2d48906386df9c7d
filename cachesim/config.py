"""Simulation configuration: loading from TOML and validation."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cachesim.generator import FILE_TYPE, ZIPF_TYPE, FilePath
from cachesim.parsers import is_available_format


class ConfigError(ValueError):
    """Raised when a configuration cannot be read or is not valid."""


@dataclass(slots=True)
class ZipfConfig:
    """Parameters of a Zipf-distributed synthetic trace."""

    s: float = 0.0
    v: float = 0.0
    imax: int = 0

    def validate(self) -> None:
        if self.s <= 1:
            raise ConfigError(
                "not valid s parameter for zipf generator. S should be > 1"
            )
        if self.v < 1:
            raise ConfigError(
                "not valid v parameter for zipf generator. V should be >= 1"
            )


@dataclass(slots=True)
class FileConfig:
    """The trace files replayed by a simulation."""

    paths: list[FilePath] = field(default_factory=list)

    def validate(self) -> None:
        if not self.paths:
            raise ConfigError("paths is empty")
        for file_path in self.paths:
            if not is_available_format(file_path.trace_type):
                raise ConfigError("not valid trace type")


@dataclass(slots=True)
class Config:
    """A complete simulation configuration."""

    trace_type: str = ""
    name: str = ""
    capacities: list[int] = field(default_factory=list)
    caches: list[str] = field(default_factory=list)
    limit: int | None = None
    zipf: ZipfConfig | None = None
    file: FileConfig | None = None

    def validate(self) -> None:
        if self.trace_type not in (ZIPF_TYPE, FILE_TYPE):
            raise ConfigError("not valid trace type")
        if not self.name:
            raise ConfigError("name is empty")
        if not self.capacities:
            raise ConfigError("capacities is empty")
        if not self.caches:
            raise ConfigError("caches is empty")

        if self.trace_type == ZIPF_TYPE:
            if self.limit is None:
                raise ConfigError("unbounded zipf trace")
            if self.zipf is None:
                raise ConfigError("not found parameters for zipf trace")
            if self.file is not None:
                raise ConfigError(
                    "found parameters for trace from file, "
                    "although the config is specified as zipf"
                )

        if self.trace_type == FILE_TYPE:
            if self.zipf is not None:
                raise ConfigError(
                    "found parameters for zipf trace, "
                    "although the config is specified as file"
                )
            if self.file is None:
                raise ConfigError("not found parameters for trace from file")

        if self.zipf is not None:
            self.zipf.validate()
        if self.file is not None:
            self.file.validate()


def _bad(what: str, expected: str) -> ConfigError:
    return ConfigError(f"unmarshal config: {what} must be {expected}")


def _uint(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise _bad(what, "a non-negative integer")
    return value


def _float(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _bad(what, "a number")
    return float(value)


def _str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise _bad(what, "a string")
    return value


def _list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise _bad(what, "an array")
    return value


def _table(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise _bad(what, "a table")
    return value


def _parse_zipf(value: Any) -> ZipfConfig:
    table = _table(value, "zipf")
    return ZipfConfig(
        s=_float(table.get("s", 0.0), "zipf.s"),
        v=_float(table.get("v", 0.0), "zipf.v"),
        imax=_uint(table.get("imax", 0), "zipf.imax"),
    )


def _parse_file(value: Any) -> FileConfig:
    table = _table(value, "file")
    paths = []
    for entry in _list(table.get("paths", []), "file.paths"):
        entry = _table(entry, "file.paths entry")
        paths.append(
            FilePath(
                trace_type=_str(entry.get("trace_type", ""), "trace_type"),
                path=_str(entry.get("path", ""), "path"),
            )
        )
    return FileConfig(paths=paths)


def parse_config(data: Mapping[str, Any]) -> Config:
    """Build and validate a configuration from a decoded TOML document."""
    limit = data.get("limit")
    config = Config(
        trace_type=_str(data.get("type", ""), "type"),
        name=_str(data.get("name", ""), "name"),
        capacities=[
            _uint(c, "capacities") for c in _list(data.get("capacities", []), "capacities")
        ],
        caches=[_str(c, "caches") for c in _list(data.get("caches", []), "caches")],
        limit=None if limit is None else _uint(limit, "limit"),
        zipf=_parse_zipf(data["zipf"]) if "zipf" in data else None,
        file=_parse_file(data["file"]) if "file" in data else None,
    )
    try:
        config.validate()
    except ConfigError as exc:
        raise ConfigError(f"validate config: {exc}") from exc
    return config


def load(config_path: str | os.PathLike[str]) -> Config:
    """Read, decode and validate the TOML configuration at ``config_path``."""
    try:
        content = Path(config_path).read_bytes()
    except OSError as exc:
        raise ConfigError(f"read config: {exc}") from exc
    try:
        data = tomllib.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"unmarshal config: {exc}") from exc
    return parse_config(data)