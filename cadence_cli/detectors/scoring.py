"""
Detection Engine
────────────────
Runs every registered strategy once against a commit pair and folds the
results into a Verdict.

Default policy (``any_triggered``):
  flagged = at least one strategy detected
  score   = triggered / total strategies
  reasons = triggered (name, reason) pairs in registration order

The policy is a plain callable, so a stricter combiner can be swapped in
without touching the strategies.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from cadence_cli.config import Config, Thresholds
from cadence_cli.detectors.base import Strategy
from cadence_cli.detectors.errors import ErrorHandlingStrategy
from cadence_cli.detectors.naming import NamingPatternStrategy
from cadence_cli.detectors.structural import FileDispersionStrategy, StructuralConsistencyStrategy
from cadence_cli.detectors.template import TemplatePatternStrategy
from cadence_cli.detectors.text import CommitMessageStrategy
from cadence_cli.detectors.timing import BurstPatternStrategy
from cadence_cli.models import CommitPair, RepositoryStats, StrategyResult, Verdict

logger = logging.getLogger(__name__)

Results = Sequence[Tuple[str, StrategyResult]]
Policy = Callable[[Results], Verdict]


def any_triggered(results: Results) -> Verdict:
    triggered = tuple((name, result.reason) for name, result in results if result.detected)
    total = len(results)
    return Verdict(
        flagged=bool(triggered),
        triggered=triggered,
        score=len(triggered) / total if total else 0.0,
        total_strategies=total,
    )


def default_strategies(max_commits_per_hour: int = 10) -> List[Strategy]:
    """The built-in registry, in evaluation order."""
    return [
        CommitMessageStrategy(),
        NamingPatternStrategy(),
        StructuralConsistencyStrategy(),
        BurstPatternStrategy(max_commits_per_hour),
        ErrorHandlingStrategy(),
        TemplatePatternStrategy(),
        FileDispersionStrategy(),
    ]


class DetectionEngine:
    """Holds the enabled strategies and aggregates their verdicts."""

    def __init__(
        self,
        strategies: Optional[Iterable[Strategy]] = None,
        policy: Policy = any_triggered,
        thresholds: Optional[Thresholds] = None,
    ):
        if strategies is None:
            strategies = default_strategies()
        # disabled strategies never count toward the score
        self.strategies = [s for s in strategies if getattr(s, "enabled", True)]
        self.policy = policy
        # carried for strategies that consume them; the built-in set uses fixed limits
        self.thresholds = thresholds or Thresholds()

    @classmethod
    def from_config(cls, config: Config, max_commits_per_hour: int = 10) -> "DetectionEngine":
        return cls(default_strategies(max_commits_per_hour), thresholds=config.thresholds)

    @property
    def names(self) -> List[str]:
        return [s.name for s in self.strategies]

    def evaluate(self, pair: CommitPair, repo_stats: RepositoryStats) -> Verdict:
        results = []
        for strategy in self.strategies:
            result = strategy.detect(pair, repo_stats)
            if result.detected:
                logger.debug("%s triggered on %s: %s", strategy.name, pair.current.short_hash, result.reason)
            results.append((strategy.name, result))
        return self.policy(results)

    def evaluate_many(
        self,
        items: Iterable[Tuple[CommitPair, RepositoryStats]],
        max_workers: Optional[int] = None,
    ) -> List[Verdict]:
        """Evaluate many pairs concurrently; verdicts come back in input order."""
        items = list(items)
        if not items:
            return []
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(lambda item: self.evaluate(*item), items))
