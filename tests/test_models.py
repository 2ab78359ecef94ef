from __future__ import annotations

from datetime import timedelta

import pytest  # type: ignore[import]

from cadence_cli.errors import InvalidTimeDeltaError
from cadence_cli.models import DiffStats, RepositoryStats, StrategyResult, Verdict
from cadence_cli.velocity import calculate_velocity, calculate_velocity_metrics, is_near_integer, safe_ratio
from conftest import make_pair


def test_strategy_result_reason_present_only_when_detected() -> None:
    assert StrategyResult.clean().reason == ""
    assert StrategyResult.flag("why").detected

    with pytest.raises(ValueError):
        StrategyResult(True, "")
    with pytest.raises(ValueError):
        StrategyResult(False, "leftover reason")


def test_diff_stats_reject_negative_counts() -> None:
    with pytest.raises(ValueError):
        DiffStats(additions=-1)


def test_repository_stats_updated_returns_new_snapshot() -> None:
    empty = RepositoryStats()
    pair = make_pair(additions=30, deletions=10, files_changed=3)

    stats = empty.updated(pair).updated(pair)

    assert empty.total_commits == 0
    assert stats.total_commits == 2
    assert stats.total_additions == 60
    assert stats.total_files_changed == 6
    assert stats.average_deletions == 10.0
    assert empty.average_additions == 0.0


def test_verdict_to_dict() -> None:
    verdict = Verdict(flagged=True, triggered=(("burst_pattern_analysis", "fast"),), score=1 / 7, total_strategies=7)

    data = verdict.to_dict()

    assert data["flagged"] is True
    assert data["score"] == 0.143
    assert data["triggered"] == [{"strategy": "burst_pattern_analysis", "reason": "fast"}]
    assert verdict.reasons == ["fast"]


def test_velocity_lines_per_minute() -> None:
    assert calculate_velocity(600, timedelta(minutes=10)) == 60.0
    assert calculate_velocity_metrics(90, timedelta(seconds=30)).loc_per_minute == 180.0


@pytest.mark.parametrize("delta", [timedelta(0), timedelta(seconds=-5)])
def test_velocity_rejects_non_positive_delta(delta) -> None:
    with pytest.raises(InvalidTimeDeltaError, match="invalid time delta"):
        calculate_velocity(100, delta)
    with pytest.raises(ValueError):
        calculate_velocity(100, delta)


@pytest.mark.parametrize(
    "value, expected",
    [(3.0, True), (2.97, True), (2.03, True), (2.5, False), (0.4, False), (1.06, False)],
)
def test_is_near_integer(value: float, expected: bool) -> None:
    assert is_near_integer(value, 0.05) is expected


def test_safe_ratio_handles_zero_denominator() -> None:
    assert safe_ratio(5, 0) == 0.0
    assert safe_ratio(5, 2) == 2.5
