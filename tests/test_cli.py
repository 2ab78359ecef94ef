from __future__ import annotations

import json

from typer.testing import CliRunner

from cadence_cli.main import app

runner = CliRunner()


def test_analyze_json(sample_repo) -> None:
    result = runner.invoke(app, ["analyze", sample_repo.working_tree_dir, "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert len(data) == 2
    newest = data[0]
    assert newest["flagged"] is True
    assert newest["score"] == round(2 / 7, 3)
    assert [t["strategy"] for t in newest["triggered"]] == ["commit_message_analysis", "burst_pattern_analysis"]
    assert newest["velocity_loc_per_min"] == 40.0
    assert data[1]["flagged"] is False
    assert "diff" not in newest


def test_analyze_table(sample_repo) -> None:
    result = runner.invoke(app, ["analyze", sample_repo.working_tree_dir])

    assert result.exit_code == 0, result.output
    assert "Analysis Complete" in result.stdout


def test_analyze_rejects_non_repository(tmp_path) -> None:
    result = runner.invoke(app, ["analyze", str(tmp_path / "missing"), "--json"])

    assert result.exit_code == 1
    assert "not a valid Git repository" in json.loads(result.stdout)["error"]


def test_analyze_rejects_zero_workers(sample_repo) -> None:
    result = runner.invoke(app, ["analyze", sample_repo.working_tree_dir, "--workers", "0"])

    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)


def test_init_config_refuses_to_overwrite(tmp_path) -> None:
    target = tmp_path / "cadence.yaml"

    first = runner.invoke(app, ["init-config", str(target)])
    second = runner.invoke(app, ["init-config", str(target)])
    forced = runner.invoke(app, ["init-config", str(target), "--force"])

    assert first.exit_code == 0
    assert "thresholds:" in target.read_text(encoding="utf-8")
    assert second.exit_code == 1
    assert forced.exit_code == 0
