from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path


def _run(args: list[str], env: dict[str, str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "matrixviz.cli", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=False,
        env=env,
    )


def test_cli_help(cli_env) -> None:
    result = _run(["--help"], cli_env)

    assert result.returncode == 0
    for command in ("compose", "decompose", "cube", "inspect"):
        assert command in result.stdout


def test_cli_missing_command(cli_env) -> None:
    assert _run([], cli_env).returncode != 0


def test_cli_compose_table(cli_env) -> None:
    result = _run(
        ["compose", "-p", "1", "2", "3", "-s", "2", "2", "2", "-r", "0", "0", "90"], cli_env
    )

    assert result.returncode == 0, result.stderr
    assert "Transformation Matrix" in result.stdout
    assert "Z: 90.00°" in result.stdout


def test_cli_compose_json(cli_env) -> None:
    result = _run(
        ["compose", "-p", "1", "2", "3", "-s", "2", "2", "2", "-r", "0", "0", "90", "--json"],
        cli_env,
    )

    assert result.returncode == 0, result.stderr
    j = json.loads(result.stdout)
    assert j["position"] == [1.0, 2.0, 3.0]
    assert abs(j["matrix"][1][0] - 2.0) < 1e-5
    assert abs(j["scale"][0] - 2.0) < 1e-5


def test_cli_compose_zero_scale_json_is_strict(cli_env) -> None:
    result = _run(["compose", "-s", "0", "1", "1", "--json"], cli_env)

    assert result.returncode == 0, result.stderr
    assert "NaN" not in result.stdout
    j = json.loads(result.stdout)
    assert j["scale"][0] == 0.0
    assert [row[0] for row in j["rotation_matrix"]] == [None, None, None]


def test_cli_compose_config_with_override(cli_env, repo_root: Path) -> None:
    cfg = repo_root / "examples" / "session.yaml"
    result = _run(["compose", "-c", str(cfg), "-p", "0", "0", "0", "--json"], cli_env)

    assert result.returncode == 0, result.stderr
    j = json.loads(result.stdout)
    assert j["position"] == [0.0, 0.0, 0.0]
    assert abs(j["euler_degrees_zyx"][2] - 90.0) < 1e-3


def test_cli_compose_clamp(cli_env) -> None:
    result = _run(["compose", "-s", "5", "1", "1", "--clamp", "--json"], cli_env)

    assert result.returncode == 0, result.stderr
    assert abs(json.loads(result.stdout)["scale"][0] - 2.0) < 1e-6


def test_cli_decompose(cli_env, repo_root: Path) -> None:
    matrix = repo_root / "examples" / "matrix.yaml"
    result = _run(["decompose", "-m", str(matrix), "--json"], cli_env)

    assert result.returncode == 0, result.stderr
    j = json.loads(result.stdout)
    assert j["position"] == [1.0, 2.0, 3.0]
    assert [round(v, 4) for v in j["scale"]] == [2.0, 2.0, 2.0]
    assert [round(v, 3) for v in j["euler_degrees_zyx"]] == [0.0, 0.0, 90.0]


def test_cli_decompose_bad_matrix(cli_env, tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2, 3]")

    result = _run(["decompose", "-m", str(bad)], cli_env)

    assert result.returncode == 1
    assert "Error:" in result.stderr


def test_cli_cube(cli_env) -> None:
    result = _run(["cube", "-p", "1", "0", "0", "--size", "1", "--json"], cli_env)

    assert result.returncode == 0, result.stderr
    j = json.loads(result.stdout)
    assert j["size"] == 1.0
    assert len(j["vertices"]) == 8
    assert min(v[0] for v in j["vertices"]) == 0.5
    assert max(v[0] for v in j["vertices"]) == 1.5


def test_cli_inspect(cli_env, tmp_path: Path) -> None:
    cfg = tmp_path / "session.yaml"
    cfg.write_text("inputs:\n  scale: [5.0, 1.0, 1.0]\n")

    result = _run(["inspect", "-c", str(cfg)], cli_env)

    assert result.returncode == 0, result.stderr
    assert "Session Summary" in result.stdout
    assert "scale.x" in result.stdout


def test_cli_inspect_malformed_radians(cli_env, tmp_path: Path) -> None:
    cfg = tmp_path / "session.yaml"
    cfg.write_text("inputs:\n  rotation_rad: 1.5\n")

    result = _run(["inspect", "-c", str(cfg)], cli_env)

    assert result.returncode == 1
    assert result.stderr.startswith("Error: inputs.rotation_rad")
    assert "Traceback" not in result.stderr


def test_cli_log_file(cli_env, tmp_path: Path) -> None:
    log_path = tmp_path / "run.jsonl"

    result = _run(["--log-file", str(log_path), "compose", "--json"], cli_env)

    assert result.returncode == 0, result.stderr
    messages = [json.loads(line)["message"] for line in log_path.read_text().splitlines()]
    assert "Composed transform" in messages
