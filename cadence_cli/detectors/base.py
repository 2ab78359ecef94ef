"""
Strategy Contract
─────────────────
Every heuristic is a stateless object exposing ``name`` and
``detect(pair, repo_stats) -> StrategyResult``. Implementations keep only their
static configuration (enabled flag, numeric parameters) and never touch I/O or
mutate their inputs, so the engine can run them in any order or concurrently.
"""

from typing import Iterable, List, Protocol, runtime_checkable

from cadence_cli.models import CommitPair, RepositoryStats, StrategyResult


@runtime_checkable
class Strategy(Protocol):
    enabled: bool

    @property
    def name(self) -> str: ...

    def detect(self, pair: CommitPair, repo_stats: RepositoryStats) -> StrategyResult: ...


class BaseStrategy:
    """Convenience base: handles the enabled flag, subclasses implement ``_detect``."""

    name = "base"

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def detect(self, pair: CommitPair, repo_stats: RepositoryStats) -> StrategyResult:
        if not self.enabled:
            return StrategyResult.clean()
        return self._detect(pair, repo_stats)

    def _detect(self, pair: CommitPair, repo_stats: RepositoryStats) -> StrategyResult:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}(enabled={self.enabled})"


def extract_added_lines(diff_content: str) -> List[str]:
    """Added lines of a unified diff, without the leading '+' and '+++' headers."""
    return [
        line[1:]
        for line in diff_content.split("\n")
        if line.startswith("+") and not line.startswith("+++")
    ]


def count_all(text: str, needles: Iterable[str]) -> int:
    """Sum of non-overlapping occurrences of every needle in ``text``."""
    return sum(text.count(needle) for needle in needles)
