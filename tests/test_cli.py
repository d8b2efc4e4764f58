import argparse
import json
import re
import subprocess
import sys

from seqquantile.cli import build_config, build_estimators, run_stream
from seqquantile.config import EstimatorConfig
from seqquantile.sinks import MemorySink


def _write_values(path, n=500):
    lines = ["# synthetic values"]
    for i in range(n):
        lines.append(str((i * 37) % n))
        if i % 100 == 0:
            lines.append("not-a-number")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def test_run_stream_emits_snapshots_and_skips_bad_lines():
    lines = ["1", "2", "bogus", "", "3", '{"value": 4}', "5", "6"]
    ests = build_estimators("all", EstimatorConfig(quantiles=(0.5,), seed=0))
    sink = MemorySink()
    report = run_stream(lines, ests, [0.5], emit_every=2, sink=sink)
    assert report["count"] == 6
    assert report["skipped"] == 1
    assert set(report["estimates"]) == {"gk", "kll", "p2", "tdigest"}
    assert [s["count"] for s in sink.snapshots] == [2, 4, 6]
    assert "0.500" in sink.snapshots[-1]["quantile_estimates"]["p2"]


def test_run_stream_skips_non_numeric_json_values(capsys):
    ests = build_estimators("gk", EstimatorConfig(quantiles=(0.5,)))
    report = run_stream(['{"value": [1]}', '{"value": {}}', "2"], ests, [0.5])
    assert report["count"] == 1
    assert report["skipped"] == 2
    assert "skipped line 1" in capsys.readouterr().err


def test_estimate_all_algorithms_json(tmp_path):
    data = tmp_path / "values.txt"
    _write_values(data)
    out = tmp_path / "report.json"
    snaps = tmp_path / "snaps.jsonl"
    proc = subprocess.run([
        sys.executable, "-m", "seqquantile.cli", "estimate", str(data),
        "--algorithm", "all", "--quantiles", "0.9", "0.5",
        "--seed", "1", "--emit-every", "100", "--jsonl", str(snaps),
        "--json", str(out), "--no-color",
    ], capture_output=True, text=True, timeout=60)
    assert proc.returncode == 0, proc.stderr
    assert "skipped line" in proc.stderr
    assert "sorted and de-duplicated to 0.5 0.9" in proc.stderr
    assert "\x1b[" not in proc.stdout
    report = json.loads(out.read_text())
    assert report["count"] == 500
    assert report["skipped"] == 5
    assert report["quantiles"] == [0.5, 0.9]
    for name in ("p2", "gk", "tdigest", "kll"):
        assert set(report["estimates"][name]) == {"0.500", "0.900"}
    assert abs(report["estimates"]["gk"]["0.500"] - 250) <= 10
    assert len(snaps.read_text().splitlines()) == 5


def test_estimate_rejects_invalid_quantile(tmp_path):
    data = tmp_path / "values.txt"
    data.write_text("1\n2\n", encoding="utf-8")
    proc = subprocess.run([
        sys.executable, "-m", "seqquantile.cli", "estimate", str(data), "--quantiles", "1.5",
    ], capture_output=True, text=True, timeout=30)
    assert proc.returncode == 2
    assert "quantiles must be in (0,1)" in proc.stderr


def test_estimate_reads_stdin():
    proc = subprocess.run([
        sys.executable, "-m", "seqquantile.cli", "estimate", "-", "--algorithm", "gk", "--no-color",
    ], input="\n".join(str(i) for i in range(1, 100)), capture_output=True, text=True, timeout=30)
    assert proc.returncode == 0, proc.stderr
    assert re.search(r"gk\s+q0\.500=(49|50|51)\b", proc.stdout), proc.stdout


def test_cli_version_matches_package():
    proc = subprocess.run([sys.executable, "-m", "seqquantile.cli", "--version"], capture_output=True, text=True)
    assert proc.returncode == 0
    out = (proc.stdout + proc.stderr).strip()
    m = re.match(r"seqquantile\s+(\d+\.\d+\.\d+)", out)
    assert m, f"Unexpected version output: {out}"
    import seqquantile
    assert m.group(1) == seqquantile.__version__


def test_build_config_notes_reordered_quantiles(capsys):
    cfg = build_config(argparse.Namespace(quantiles=[0.9, 0.5, 0.9], capacity=16))
    assert cfg.quantiles == (0.5, 0.9)
    assert cfg.capacity == 16
    assert "sorted and de-duplicated" in capsys.readouterr().err

    build_config(argparse.Namespace(quantiles=[0.25, 0.75]))
    assert capsys.readouterr().err == ""
