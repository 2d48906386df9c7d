"""Bar charts from throughput and memory benchmark output."""

from __future__ import annotations

import argparse
import os
import re
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from matplotlib.figure import Figure

_INT = re.compile(r"[+-]?[0-9]+")


class BenchmarkOutputError(ValueError):
    """Raised when benchmark output does not have the expected shape."""


def _atoi(text: str) -> int:
    if not _INT.fullmatch(text):
        raise BenchmarkOutputError(f"can not parse benchmark output: {text!r}")
    return int(text)


def parse_throughput(lines: Iterable[str]) -> dict[str, list[tuple[str, int]]]:
    """Group throughput results by workload as ``(cache, ops_per_sec)`` pairs.

    The first four lines (environment) and the last two (summary) are skipped.
    """
    lines = list(lines)
    workloads: dict[str, list[tuple[str, int]]] = {}
    for line in lines[4 : len(lines) - 2]:
        fields = line.split()
        try:
            ops_per_sec = _atoi(fields[4])
            bench_parts = fields[0].split("/")[1].split("_")
            cache_name = bench_parts[1]
            workload = bench_parts[2].split("-")[0]
        except IndexError:
            raise BenchmarkOutputError("can not parse benchmark output") from None
        workloads.setdefault(workload, []).append((cache_name, ops_per_sec))
    return workloads


def parse_memory(lines: Iterable[str]) -> dict[int, list[tuple[str, float]]]:
    """Group memory results by capacity as ``(cache, allocated_mb)`` pairs."""
    capacities: dict[int, list[tuple[str, float]]] = {}
    for line in lines:
        fields = line.split()
        if len(fields) < 3:
            raise BenchmarkOutputError("can not parse benchmark output")
        capacity = _atoi(fields[1])
        try:
            alloc = float(fields[2])
        except ValueError:
            raise BenchmarkOutputError(
                f"can not parse benchmark output: {fields[2]!r}"
            ) from None
        capacities.setdefault(capacity, []).append((fields[0], alloc))
    return capacities


def _save_bar(
    title: str,
    ylabel: str,
    series: Sequence[tuple[str, float]],
    path: Path,
    y_format: str | None = None,
) -> None:
    figure = Figure(figsize=(9, 6), facecolor="white")
    axes = figure.subplots()
    width = 0.8 / len(series)
    for i, (label, value) in enumerate(series):
        axes.bar(i * width - 0.4 + width / 2, value, width=width, label=label)
    axes.set_xticks([0], ["cache"])
    axes.set_ylabel(ylabel)
    if y_format is not None:
        axes.yaxis.set_major_formatter(y_format)
    axes.set_title(title)
    axes.legend(loc="upper left", bbox_to_anchor=(1.0, 0.9))
    figure.savefig(path, bbox_inches="tight")


def plot_throughput(path: str | os.PathLike[str]) -> list[Path]:
    """Write one chart per workload next to the benchmark output file."""
    path = Path(path)
    workloads = parse_throughput(path.read_text().splitlines())
    written = []
    for workload, caches in workloads.items():
        image_path = path.parent / f"{workload.replace('%', '')}.png"
        _save_bar(workload, "ops/s", caches, image_path)
        written.append(image_path)
    return written


def plot_memory(path: str | os.PathLike[str]) -> list[Path]:
    """Write one chart per capacity next to the memory results file."""
    path = Path(path)
    capacities = parse_memory(path.read_text().splitlines())
    written = []
    for capacity, results in capacities.items():
        image_path = path.parent / f"memory_{capacity}.png"
        _save_bar(
            f"Memory consumption ({capacity})",
            "alloc",
            results,
            image_path,
            "{x:g} MB",
        )
        written.append(image_path)
    return written


def _run(plot, prog: str, argv: list[str] | None) -> int:
    parser = argparse.ArgumentParser(prog=prog)
    parser.add_argument("path", help="File with benchmark output")
    args = parser.parse_args(argv)
    try:
        plot(args.path)
    except (OSError, BenchmarkOutputError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


def throughput_main(argv: list[str] | None = None) -> int:
    """Command-line entry point for throughput charts."""
    return _run(plot_throughput, "throughput-charts", argv)


def memory_main(argv: list[str] | None = None) -> int:
    """Command-line entry point for memory charts."""
    return _run(plot_memory, "memory-charts", argv)