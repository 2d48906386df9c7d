# cachesim

`cachesim` replays key-access traces through cache eviction policies and reports the
hit ratio of each policy at each capacity. A trace is either a synthetic Zipf
distribution or one or more recorded trace files. Each run prints a table to standard
output and saves a line chart of hit ratio against capacity.

The package also has two small tools that draw bar charts from throughput and memory
benchmark output.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running a simulation

```
cachesim-simulate --config configs/zipf.toml --output results
```

`--config` (also accepted as `-config`) defaults to `configs/zipf.toml`, and
`--output` defaults to `results`. The results table is printed in GitHub Markdown
style, and the chart is written to `<output>/<name>.png`, where `<name>` is the
configured name in lower case. Progress is logged at INFO level. The command exits
with status 1 and a message on standard error if the configuration cannot be loaded
or the simulation fails.

Every cache is simulated at every capacity, each over a freshly generated trace. For a
Zipf trace this means each simulation draws its own random sample.

### Configuration

The configuration is a TOML file, loaded with `cachesim.config.load`. Every
configuration needs:

- `type`: `"zipf"` or `"file"`
- `name`: the title of the report
- `capacities`: the cache sizes to simulate (non-negative integers)
- `caches`: the policies to compare; `cachesim.policies.available_products()` lists
  the accepted names
- `limit`: the most events to replay (required for `zipf`, optional for `file`)

A Zipf trace:

```toml
type = "zipf"
name = "zipf"
capacities = [500, 1000, 2000, 5000]
caches = ["lru"]
limit = 1000000

[zipf]
s = 1.0001
v = 1
imax = 1000000
```

`s` must be greater than 1 and `v` at least 1. Keys fall in `[0, imax]`.

A trace read from files, replayed in the order listed:

```toml
type = "file"
name = "p8"
capacities = [1000, 10000, 100000]
caches = ["lru"]

[[file.paths]]
trace_type = "arc"
path = "traces/P8.lis"
```

A configuration that mixes `[zipf]` and `[file]` sections, names an unknown trace
format, or is missing what its `type` needs, is rejected with
`cachesim.config.ConfigError`.

### Trace formats

| `trace_type`     | Layout                                                                |
|------------------|-----------------------------------------------------------------------|
| `arc`            | text lines `start count _ _`; keys `start` to `start + count - 1`     |
| `lirs`           | text, one decimal key per line; a blank line ends the trace           |
| `libcachesimCSV` | CSV with a header row; the key is the second of four columns          |
| `oracleGeneral`  | 24-byte little-endian records; the key is the 64-bit id at offset 4   |
| `scarab`         | 8-byte big-endian keys                                                |
| `corda`          | 8-byte big-endian keys                                                |

`cachesim.reader.open_trace` decompresses files ending in `.gz`, `.zst` or `.xz` on the
fly and reads anything else as is; a corrupt compressed file raises
`cachesim.reader.DecoderError`. `cachesim.parsers.new_parser` returns an iterator of
`AccessEvent`s for a format name; a malformed trace raises
`cachesim.parsers.ParseError` and an unknown format raises
`cachesim.parsers.UnknownTraceFormatError`.

During a simulation, a trace file that cannot be opened or parsed is logged as an
error and ends the trace at that point instead of stopping the run.

## Using the library

```python
from cachesim.generator import generate_zipf
from cachesim.policies import LRU, Optimal, Policy

policy = Policy(LRU(1000))
optimal = Optimal(1000)
for event in generate_zipf(1.0001, 1, 100_000, 200_000, 42):
    policy.record(event)
    optimal.record(event)

print(f"lru {policy.ratio():.2f}%  optimal {optimal.ratio():.2f}%")
```

`Policy` counts a hit whenever the cache already holds the key and otherwise stores it.
`Optimal` replays the whole recorded trace knowing every key's total access count and
evicts the resident key accessed least often, giving a reference to compare the other
policies against. Both return ratios in percent.

Other building blocks:

- `cachesim.generator.generate_file(paths, limit)` yields the events of a list of
  `FilePath(trace_type, path)` entries.
- `cachesim.generator.limited(events, limit)` caps any event stream.
- `cachesim.zipf.Zipf` draws Zipf-distributed integers from a `random.Random`.
- `cachesim.report.render_table`, `save_chart` and `report` present lists of
  `Result(name, capacity, ratio)` rows.

## Benchmark charts

Throughput benchmark output, whose result lines are named like
`BenchmarkCache/zipf_<cache>_<workload>-<n>` with ops/s in the fifth column; the first
four and the last two lines of the file are skipped:

```
cachesim-throughput-chart results/throughput.txt
```

One bar chart per workload is saved next to the input file, named after the workload
with `%` signs removed.

Memory benchmark output, one line per cache with its name, capacity and allocated
megabytes:

```
cachesim-memory-chart results/memory.txt
```

One bar chart per capacity is saved next to the input file as `memory_<capacity>.png`.
Lines that cannot be parsed raise `cachesim.benchcharts.BenchmarkOutputError`, and the
commands exit with status 1.

## What is not included

The only cache policy that can be named under `caches` is `lru`. The package does not
include other cache implementations to compare against, and it does not run the
throughput or memory benchmarks themselves; the chart tools only read their output.