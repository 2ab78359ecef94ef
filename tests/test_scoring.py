from __future__ import annotations

import pytest  # type: ignore[import]

from cadence_cli.config import Config, Thresholds
from cadence_cli.detectors import (
    BurstPatternStrategy,
    CommitMessageStrategy,
    DetectionEngine,
    Strategy,
    default_strategies,
)
from cadence_cli.models import Verdict
from conftest import make_pair


def test_default_registry_order() -> None:
    engine = DetectionEngine()

    assert engine.names == [
        "commit_message_analysis",
        "naming_pattern_analysis",
        "structural_consistency_analysis",
        "burst_pattern_analysis",
        "error_handling_analysis",
        "template_pattern_analysis",
        "file_extension_analysis",
    ]
    assert all(isinstance(s, Strategy) for s in engine.strategies)


def test_two_of_seven_triggered(repo_stats) -> None:
    pair = make_pair("minor fixes", additions=60, seconds=100)

    verdict = DetectionEngine().evaluate(pair, repo_stats)

    assert verdict.flagged
    assert verdict.score == pytest.approx(2 / 7)
    assert verdict.total_strategies == 7
    assert [name for name, _ in verdict.triggered] == ["commit_message_analysis", "burst_pattern_analysis"]


def test_clean_pair_is_not_flagged(repo_stats) -> None:
    verdict = DetectionEngine().evaluate(make_pair(), repo_stats)

    assert not verdict.flagged
    assert verdict.score == 0.0
    assert verdict.triggered == ()


def test_disabled_strategies_are_dropped(repo_stats) -> None:
    engine = DetectionEngine([CommitMessageStrategy(enabled=False), BurstPatternStrategy(0), BurstPatternStrategy(5)])

    verdict = engine.evaluate(make_pair("minor fixes", additions=60, seconds=100), repo_stats)

    assert engine.names == ["burst_pattern_analysis"]
    assert verdict.score == 1.0


def test_empty_engine_scores_zero(repo_stats) -> None:
    verdict = DetectionEngine([]).evaluate(make_pair("minor fixes"), repo_stats)

    assert not verdict.flagged
    assert verdict.score == 0.0


def test_policy_is_pluggable(repo_stats) -> None:
    def majority(results):
        hits = tuple((name, r.reason) for name, r in results if r.detected)
        return Verdict(flagged=len(hits) * 2 > len(results), triggered=hits, score=0.0, total_strategies=len(results))

    verdict = DetectionEngine(policy=majority).evaluate(make_pair("minor fixes", additions=60, seconds=100), repo_stats)

    assert not verdict.flagged
    assert len(verdict.triggered) == 2


def test_evaluation_is_deterministic(repo_stats) -> None:
    pair = make_pair("implement add functionality and enhance functionality", additions=150, deletions=150)
    engine = DetectionEngine()

    first = engine.evaluate(pair, repo_stats)
    second = engine.evaluate(pair, repo_stats)

    assert first == second
    for strategy in default_strategies():
        assert strategy.detect(pair, repo_stats) == strategy.detect(pair, repo_stats)


def test_evaluate_many_keeps_input_order(repo_stats) -> None:
    pairs = [make_pair("minor fixes"), make_pair(), make_pair(additions=150, deletions=150)]

    verdicts = DetectionEngine().evaluate_many([(p, repo_stats) for p in pairs], max_workers=3)

    assert [v.flagged for v in verdicts] == [True, False, True]
    assert DetectionEngine().evaluate_many([]) == []


def test_from_config_carries_thresholds() -> None:
    config = Config(thresholds=Thresholds(suspicious_additions=42))

    engine = DetectionEngine.from_config(config)

    assert engine.thresholds.suspicious_additions == 42
    assert len(engine.strategies) == 7
