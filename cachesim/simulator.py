"""Running cache policies over a trace and reporting their hit ratios."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path

from cachesim.config import Config, ConfigError, load
from cachesim.events import AccessEvent
from cachesim.generator import FILE_TYPE, ZIPF_TYPE, generate_file, generate_zipf
from cachesim.policies import Policy, available_products, new_product
from cachesim.report import Result, report

logger = logging.getLogger(__name__)


def new_generator(config: Config) -> Iterator[AccessEvent]:
    """Return a fresh stream of access events described by ``config``."""
    if config.trace_type == ZIPF_TYPE:
        zipf = config.zipf
        return generate_zipf(zipf.s, zipf.v, zipf.imax, config.limit)
    if config.trace_type == FILE_TYPE:
        return generate_file(config.file.paths, config.limit)
    raise ValueError("unknown trace type")


class Simulator:
    """Simulates every configured cache at every configured capacity."""

    def __init__(
        self, config: Config, output_dir: str | os.PathLike[str] = "results"
    ) -> None:
        self.config = config
        self.output_dir = Path(output_dir)

    def simulate(self) -> list[list[Result]]:
        """Run all simulations, report them and return one sorted row per cache."""
        known = set(available_products())
        for name in self.config.caches:
            if name not in known:
                raise ValueError(f"not valid cache name: {name}")

        priority = {name: i for i, name in enumerate(self.config.caches)}
        table: list[list[Result]] = [[] for _ in self.config.caches]
        for capacity in self.config.capacities:
            for name in self.config.caches:
                result = self._simulate_policy(name, capacity)
                table[priority[result.name]].append(result)

        logger.info("All simulations are complete")

        for results in table:
            results.sort(key=lambda r: r.capacity)

        report(self.config.name, table, self.output_dir)
        return table

    def _simulate_policy(self, name: str, capacity: int) -> Result:
        policy = Policy(new_product(name, capacity))
        try:
            for event in new_generator(self.config):
                policy.record(event)
            result = Result(policy.name, capacity, policy.ratio())
        finally:
            policy.close()
        logger.info(
            "Simulation for cache %s at capacity %d completed with hit ratio %0.2f%%",
            result.name,
            result.capacity,
            result.ratio,
        )
        return result


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point: simulate the trace described by a config file."""
    parser = argparse.ArgumentParser(
        prog="cachesim", description="Simulate cache hit ratios over a trace."
    )
    parser.add_argument(
        "-config",
        "--config",
        default="configs/zipf.toml",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--output", default="results", help="Directory for the chart image"
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    try:
        config = load(args.config)
    except ConfigError as exc:
        print(f"load config: {exc}", file=sys.stderr)
        return 1

    try:
        Simulator(config, args.output).simulate()
    except (ValueError, OSError) as exc:
        print(f"simulate trace: {exc}", file=sys.stderr)
        return 1
    return 0