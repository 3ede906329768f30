"""Tests for the execution modes (single run, benchmark) and config handling.

Creates temporary result / chart directories under pytest tmp_path.
"""

from __future__ import annotations

import json
import random
import shutil
from pathlib import Path

import pytest

from jssp_tabu.construction import construct_bidirectional
from jssp_tabu.models import NeighborhoodStructure
from jssp_tabu.modes.benchmark import compare_constructions, run_benchmark
from jssp_tabu.modes.common import list_instance_files, load_config, params_from_config
from jssp_tabu.modes.single import run_single
from jssp_tabu.parser import load_instance
from jssp_tabu.search import SearchResult, TabuSearchParams
from jssp_tabu.solution import Solution

FIXTURES = Path(__file__).resolve().parent / "fixtures"
FT06 = str(FIXTURES / "ft06")
SMALL = TabuSearchParams(max_iter=30, delta=15)


def test_run_single_writes_result_and_charts(tmp_path: Path) -> None:
    result_file = tmp_path / "out" / "ft06.txt"
    charts_dir = tmp_path / "charts"
    result = run_single(
        FT06,
        SMALL,
        random.Random(0),
        runs=2,
        result_file=str(result_file),
        charts_dir=str(charts_dir),
    )
    text = result_file.read_text(encoding="utf-8")
    assert text == result.best.format_result()
    lines = text.splitlines()
    assert lines[0] == "6 6"
    assert len(lines) == 8
    assert all(len(line.split()) == 6 for line in lines[1:7])
    assert int(lines[-1]) == round(result.best_cost)

    assert list(charts_dir.glob("gantt_tabu_c*_ft06_*.png"))
    assert list(charts_dir.glob("tabu_progress_ft06_*.png"))


def test_run_single_rejects_zero_runs() -> None:
    with pytest.raises(ValueError):
        run_single(FT06, SMALL, random.Random(0), runs=0)


def test_run_single_keeps_first_of_equal_best_runs(monkeypatch: pytest.MonkeyPatch) -> None:
    import jssp_tabu.modes.single as single_module

    toy = str(FIXTURES / "toy2x2")
    instance = load_instance(toy)
    costs = iter([9.0, 7.0, 7.0])
    produced: list[SearchResult] = []

    def fake_search(data, params, rng=None, trace_file=None):
        cost = next(costs)
        solution = Solution(instance, construct_bidirectional(instance))
        produced.append(SearchResult(solution, cost, cost, 0, history=[cost]))
        return produced[-1]

    monkeypatch.setattr(single_module, "tabu_search", fake_search)
    result = run_single(toy, SMALL, random.Random(0), runs=3)
    assert result is produced[1]


def test_compare_constructions() -> None:
    block = compare_constructions(load_instance(FT06))
    assert set(block) == {"bidirectional", "left"}
    for entry in block.values():
        assert entry["cost"] >= 55
        assert entry["time"] >= 0


def test_run_benchmark_directory(tmp_path: Path) -> None:
    instances = tmp_path / "instances"
    instances.mkdir()
    shutil.copy(FIXTURES / "ft06", instances / "ft06")
    shutil.copy(FIXTURES / "toy2x2", instances / "toy2x2")
    out_dir = tmp_path / "results"

    payload = run_benchmark(str(instances), 2, SMALL, random.Random(1), out_dir=str(out_dir))

    json_files = list(out_dir.glob("benchmark_results_*.json"))
    assert len(json_files) == 1
    saved = json.loads(json_files[0].read_text(encoding="utf-8"))
    assert saved == payload
    for key in ["source", "timestamp", "params", "instances"]:
        assert key in saved
    assert saved["params"]["neighborhood"] == "n1"

    entries = {e["instance"]: e for e in saved["instances"]}
    assert set(entries) == {"ft06", "toy2x2"}
    ft06 = entries["ft06"]
    assert (ft06["jobs"], ft06["machines"], ft06["optimum"]) == (6, 6, 55)
    assert len(ft06["tabu"]["costs"]) == 2
    assert ft06["tabu"]["best"] == min(ft06["tabu"]["costs"])
    assert ft06["tabu"]["gap_pct"] >= 0
    toy = entries["toy2x2"]
    assert toy["optimum"] is None
    assert toy["tabu"]["gap_pct"] is None
    assert toy["tabu"]["best"] == 7.0


def test_list_instance_files(tmp_path: Path) -> None:
    (tmp_path / "b").write_text("x")
    (tmp_path / "a").write_text("x")
    (tmp_path / ".hidden").write_text("x")
    assert [Path(p).name for p in list_instance_files(str(tmp_path))] == ["a", "b"]
    assert list_instance_files(FT06) == [FT06]


def test_load_config_yaml_and_params(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(
        "instance: tests/fixtures/ft06\n"
        "tabu:\n"
        "  max_iter: 50\n"
        "  delta: 20\n"
        "  neighborhood: NA\n"
        "  construction: left\n",
        encoding="utf-8",
    )
    cfg = load_config(str(cfg_path))
    params = params_from_config(cfg)
    assert params.max_iter == 50
    assert params.delta == 20
    assert params.safety_factor == 5
    assert params.neighborhood is NeighborhoodStructure.NA
    assert params.construction == "left"


def test_load_config_json_defaults(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(json.dumps({"instance": "x"}), encoding="utf-8")
    params = params_from_config(load_config(str(cfg_path)))
    assert (params.max_iter, params.delta) == (1200, 800)
    assert params.neighborhood is NeighborhoodStructure.N1
    assert params.construction == "bidirectional"


def test_config_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))
    bad = tmp_path / "list.yaml"
    bad.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(bad))
    with pytest.raises(ValueError):
        params_from_config({"tabu": {"neighborhood": "n5"}})


def test_main_single_mode(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    import main

    result_file = tmp_path / "ft06.txt"
    main.main(
        {
            "instance": FT06,
            "mode": "single",
            "seed": 3,
            "tabu": {"max_iter": 20, "delta": 10},
            "output": {"result_file": str(result_file)},
        }
    )
    printed = capsys.readouterr().out
    assert printed == result_file.read_text(encoding="utf-8") + "\n"
    assert printed.startswith("6 6\n")


def test_main_rejects_bad_config() -> None:
    import main

    with pytest.raises(ValueError):
        main.main({"mode": "single"})
    with pytest.raises(ValueError):
        main.main({"instance": FT06, "mode": "compare"})
