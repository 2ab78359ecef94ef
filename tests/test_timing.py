from __future__ import annotations

from cadence_cli.detectors.timing import BurstPatternStrategy
from conftest import make_pair


def test_rapid_substantial_commit_flags(repo_stats) -> None:
    result = BurstPatternStrategy(10).detect(make_pair(additions=60, seconds=100), repo_stats)

    assert result.detected
    assert "100.0 seconds" in result.reason


def test_slow_commit_is_clean(repo_stats) -> None:
    assert not BurstPatternStrategy(10).detect(make_pair(additions=60, seconds=400), repo_stats).detected


def test_small_rapid_commit_is_clean(repo_stats) -> None:
    assert not BurstPatternStrategy(10).detect(make_pair(additions=50, seconds=10), repo_stats).detected


def test_non_positive_rate_disables(repo_stats) -> None:
    strategy = BurstPatternStrategy(0)

    assert not strategy.enabled
    assert not strategy.detect(make_pair(additions=60, seconds=100), repo_stats).detected
