from __future__ import annotations

import pytest  # type: ignore[import]

from cadence_cli.detectors.errors import ErrorHandlingStrategy
from conftest import added, make_pair


@pytest.fixture()
def strategy() -> ErrorHandlingStrategy:
    return ErrorHandlingStrategy()


def test_insufficient_error_handling_flags(strategy, repo_stats) -> None:
    diff = added([f"x{i} = {i}" for i in range(40)])

    result = strategy.detect(make_pair(additions=120, diff=diff), repo_stats)

    assert result.detected
    assert "(0 patterns, expected ~1)" in result.reason


def test_excessive_error_handling_flags(strategy, repo_stats) -> None:
    diff = added(["try: handle_error()" for _ in range(20)])

    result = strategy.detect(make_pair(additions=60, diff=diff), repo_stats)

    assert result.detected
    assert "Excessive" in result.reason


def test_short_diffs_are_not_analyzed(strategy, repo_stats) -> None:
    diff = added([f"x{i} = {i}" for i in range(19)])

    assert not strategy.detect(make_pair(additions=120, diff=diff), repo_stats).detected


def test_message_fallback_for_large_commits(strategy, repo_stats) -> None:
    assert strategy.detect(make_pair("Add importer", additions=400), repo_stats).detected
    assert not strategy.detect(make_pair("Add importer with error reporting", additions=400), repo_stats).detected
    assert not strategy.detect(make_pair("Add importer", additions=250), repo_stats).detected
