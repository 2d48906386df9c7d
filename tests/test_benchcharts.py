import pytest

from cachesim.benchcharts import (
    BenchmarkOutputError,
    memory_main,
    parse_memory,
    parse_throughput,
    plot_memory,
    plot_throughput,
    throughput_main,
)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

THROUGHPUT_LINES = [
    "goos: linux",
    "goarch: amd64",
    "pkg: example/throughput",
    "cpu: test cpu",
    "BenchmarkCache/zipf_otter_reads=100%,writes=0%-8  1000  10.5 ns/op  95238095 ops/s  0 B/op  0 allocs/op",
    "BenchmarkCache/zipf_lru_reads=100%,writes=0%-8  1000  20.1 ns/op  49751243 ops/s  0 B/op  0 allocs/op",
    "BenchmarkCache/zipf_otter_reads=0%,writes=100%-8  1000  30.0 ns/op  33333333 ops/s  0 B/op  0 allocs/op",
    "PASS",
    "ok  \texample/throughput\t3.2s",
]

MEMORY_LINES = [
    "otter\t1000\t1.5 MB\t2.5 MB",
    "lru\t1000\t0.75 MB\t1.25 MB",
    "otter\t5000\t3.5 MB\t4.5 MB",
]


def test_parse_throughput_groups_by_workload():
    result = parse_throughput(THROUGHPUT_LINES)
    assert result == {
        "reads=100%,writes=0%": [("otter", 95238095), ("lru", 49751243)],
        "reads=0%,writes=100%": [("otter", 33333333)],
    }


def test_parse_throughput_bad_number():
    lines = list(THROUGHPUT_LINES)
    lines[4] = lines[4].replace("95238095", "fast")
    with pytest.raises(BenchmarkOutputError):
        parse_throughput(lines)


def test_parse_throughput_short_line():
    lines = THROUGHPUT_LINES[:4] + ["BenchmarkCache/zipf_otter 1"] + THROUGHPUT_LINES[-2:]
    with pytest.raises(BenchmarkOutputError):
        parse_throughput(lines)


def test_parse_memory_groups_by_capacity():
    assert parse_memory(MEMORY_LINES) == {
        1000: [("otter", 1.5), ("lru", 0.75)],
        5000: [("otter", 3.5)],
    }


@pytest.mark.parametrize("line", ["otter\tmany\t1.5 MB", "otter\t1000\tlots MB", "otter"])
def test_parse_memory_errors(line):
    with pytest.raises(BenchmarkOutputError):
        parse_memory([line])


def test_plot_throughput_writes_charts(tmp_path):
    source = tmp_path / "perf.txt"
    source.write_text("\n".join(THROUGHPUT_LINES) + "\n")
    written = plot_throughput(source)
    names = sorted(p.name for p in written)
    assert names == ["reads=0,writes=100.png", "reads=100,writes=0.png"]
    assert all(p.read_bytes().startswith(PNG_SIGNATURE) for p in written)


def test_plot_memory_writes_charts(tmp_path):
    source = tmp_path / "memory.txt"
    source.write_text("\n".join(MEMORY_LINES) + "\n")
    written = plot_memory(source)
    assert sorted(p.name for p in written) == ["memory_1000.png", "memory_5000.png"]
    assert all(p.read_bytes().startswith(PNG_SIGNATURE) for p in written)


def test_mains(tmp_path):
    source = tmp_path / "memory.txt"
    source.write_text("\n".join(MEMORY_LINES) + "\n")
    assert memory_main([str(source)]) == 0
    assert (tmp_path / "memory_1000.png").exists()
    assert throughput_main([str(tmp_path / "missing.txt")]) == 1
    assert memory_main([str(tmp_path / "missing.txt")]) == 1