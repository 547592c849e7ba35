import json
import os
import sys

import pandas as pd

import euclid_tsp
import tsp_strategy_benchmark


def run_main(monkeypatch, module, *argv):
    monkeypatch.setattr(sys, "argv", [module.__name__, *argv])
    module.main()


def test_skips_brute_force_above_limit(monkeypatch, capsys):
    run_main(monkeypatch, euclid_tsp, "--n", "12", "--seed", "0", "--iterations", "200")
    out = capsys.readouterr().out
    assert "[info] Skipping brute force: n=12 > max-brute-n=10" in out
    assert "nearest" in out
    assert not any(line.startswith("brute ") for line in out.splitlines())


def test_json_output_only(monkeypatch, capsys):
    run_main(monkeypatch, euclid_tsp, "--n", "6", "--seed", "1", "--iterations", "200", "--json")
    data = json.loads(capsys.readouterr().out)
    assert [rec["method"] for rec in data] == ["brute", "nearest", "annealing", "hill"]
    for rec in data:
        assert sorted(rec["tour"]) == list(range(6))
    brute = data[0]["cost"]
    assert all(rec["cost"] >= brute - 1e-9 for rec in data)


def test_json_output_with_brute_force_skipped(monkeypatch, capsys):
    run_main(monkeypatch, euclid_tsp, "--n", "12", "--methods", "brute,nearest", "--json")
    data = json.loads(capsys.readouterr().out)
    assert [rec["method"] for rec in data] == ["nearest"]


def test_plot_dir_writes_pngs(monkeypatch, capsys, tmp_path):
    run_main(monkeypatch, euclid_tsp, "--n", "5", "--seed", "3", "--iterations", "100",
             "--plot-dir", str(tmp_path))
    for name in ("tour_brute.png", "tour_nearest.png", "tour_annealing.png", "tour_hill.png", "history.png"):
        assert os.path.getsize(tmp_path / name) > 0
    assert f"[info] Plots written to {tmp_path}" in capsys.readouterr().out


def test_benchmark_main_writes_results(monkeypatch, capsys, tmp_path):
    run_main(monkeypatch, tsp_strategy_benchmark, "--sizes", "4,5", "--runs", "2", "--iterations", "100",
             "--out-dir", str(tmp_path))
    df = pd.read_csv(tmp_path / "strategy_results.csv")
    assert len(df) == 2 * 2 * 4
    assert (tmp_path / "strategy_summary.csv").exists()
    assert "Results written to" in capsys.readouterr().out
