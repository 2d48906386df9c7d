import pytest

from cachesim.config import Config, FileConfig, ZipfConfig
from cachesim.generator import FilePath
from cachesim.simulator import Simulator, main, new_generator


def _write_trace(tmp_path):
    path = tmp_path / "trace.lirs"
    path.write_text("1\n2\n1\n2\n")
    return path


def _file_config(tmp_path, capacities=(2, 1), caches=("lru",)):
    trace = _write_trace(tmp_path)
    return Config(
        trace_type="file",
        name="Trace",
        capacities=list(capacities),
        caches=list(caches),
        file=FileConfig(paths=[FilePath("lirs", str(trace))]),
    )


def test_new_generator_zipf_respects_limit_and_range():
    config = Config(
        trace_type="zipf",
        name="z",
        capacities=[10],
        caches=["lru"],
        limit=100,
        zipf=ZipfConfig(s=1.01, v=1, imax=50),
    )
    events = list(new_generator(config))
    assert len(events) == 100
    assert all(0 <= e.key <= 50 for e in events)


def test_new_generator_file(tmp_path):
    events = list(new_generator(_file_config(tmp_path)))
    assert [e.key for e in events] == [1, 2, 1, 2]


def test_new_generator_unknown_type():
    with pytest.raises(ValueError, match="unknown trace type"):
        new_generator(Config(trace_type="other"))


def test_simulate_ratios_sorted_by_capacity(tmp_path):
    config = _file_config(tmp_path)
    table = Simulator(config, tmp_path / "out").simulate()
    assert len(table) == 1
    assert [r.capacity for r in table[0]] == [1, 2]
    assert [r.name for r in table[0]] == ["lru", "lru"]
    assert table[0][0].ratio == 0.0
    assert table[0][1].ratio == 50.0
    assert (tmp_path / "out" / "trace.png").exists()


def test_simulate_invalid_cache_name(tmp_path):
    config = _file_config(tmp_path, caches=("nope",))
    with pytest.raises(ValueError, match="not valid cache name: nope"):
        Simulator(config, tmp_path / "out").simulate()
    assert not (tmp_path / "out").exists()


def test_main_runs_config(tmp_path, capsys):
    trace = _write_trace(tmp_path)
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        'type = "file"\n'
        'name = "Trace"\n'
        "capacities = [1, 2]\n"
        'caches = ["lru"]\n'
        "[file]\n"
        f"paths = [{{trace_type = \"lirs\", path = '{trace}'}}]\n"
    )
    out_dir = tmp_path / "out"
    assert main(["--config", str(config_path), "--output", str(out_dir)]) == 0
    assert (out_dir / "trace.png").exists()
    assert "lru" in capsys.readouterr().out


def test_main_missing_config(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "missing.toml")]) == 1
    assert "load config" in capsys.readouterr().err