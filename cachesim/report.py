"""Reporting of simulation results as a text table and a hit-ratio chart."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from matplotlib.figure import Figure
from tabulate import tabulate


@dataclass(frozen=True, slots=True)
class Result:
    """Hit ratio, in percent, of one cache at one capacity."""

    name: str
    capacity: int
    ratio: float


def format_int(n: int) -> str:
    """Format an integer with commas between groups of three digits."""
    return f"{n:,}"


def _check(table: Sequence[Sequence[Result]]) -> None:
    if not table or any(not results for results in table):
        raise ValueError("no simulation results to report")


def render_table(table: Sequence[Sequence[Result]]) -> str:
    """Render one row per cache and one column per capacity."""
    _check(table)
    header = ["Cache", *(format_int(r.capacity) for r in table[0])]
    rows = [
        [results[0].name, *(f"{r.ratio:0.2f}" for r in results)]
        for results in table
    ]
    return tabulate(rows, headers=header, tablefmt="github", disable_numparse=True)


def save_chart(
    name: str,
    table: Sequence[Sequence[Result]],
    directory: str | os.PathLike[str] = "results",
) -> Path:
    """Draw hit ratio against capacity for every cache and save it as PNG."""
    _check(table)
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    image_path = out_dir / f"{name.lower()}.png"

    capacities = [r.capacity for r in table[0]]
    positions = list(range(len(capacities)))

    figure = Figure(figsize=(9, 6), facecolor="white")
    axes = figure.subplots()
    for results in table:
        axes.plot(
            positions[: len(results)],
            [r.ratio for r in results],
            marker="o",
            label=results[0].name,
        )
    axes.set_xticks(positions, [str(c) for c in capacities])
    axes.set_xlabel("capacity")
    axes.set_ylabel("hit ratio")
    axes.yaxis.set_major_formatter("{x:g}%")
    axes.set_title(name)
    axes.legend(loc="upper left", bbox_to_anchor=(1.0, 0.9))
    figure.savefig(image_path, bbox_inches="tight")
    return image_path


def report(
    name: str,
    table: Sequence[Sequence[Result]],
    directory: str | os.PathLike[str] = "results",
) -> Path:
    """Print the results table and save the chart; return the chart's path."""
    print(render_table(table))
    return save_chart(name, table, directory)