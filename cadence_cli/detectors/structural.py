"""
Structural Signals
──────────────────
Two size-shape heuristics that only look at diff stats:

1. Structural consistency: refactors whose additions and deletions are
   suspiciously balanced (~1:1) or exact multiples (2:1, 3:1, ...).
2. File dispersion: bulk creation of many files whose average size is a
   near-whole number of lines, as produced by generators.
"""

from cadence_cli.detectors.base import BaseStrategy
from cadence_cli.models import CommitPair, RepositoryStats, StrategyResult
from cadence_cli.velocity import is_near_integer


class StructuralConsistencyStrategy(BaseStrategy):
    name = "structural_consistency_analysis"

    def __init__(self, enabled: bool = True, min_lines: int = 100, tolerance: float = 0.05):
        super().__init__(enabled)
        self.min_lines = min_lines
        self.tolerance = tolerance

    def _detect(self, pair: CommitPair, repo_stats: RepositoryStats) -> StrategyResult:
        additions, deletions = pair.stats.additions, pair.stats.deletions
        if additions <= self.min_lines or deletions <= self.min_lines:
            return StrategyResult.clean()

        ratio = additions / deletions

        if 0.9 <= ratio <= 1.1:
            return StrategyResult.flag(
                f"Suspiciously balanced addition/deletion ratio: {ratio:.2f} "
                "- may indicate automated refactoring"
            )

        if is_near_integer(ratio, self.tolerance) or is_near_integer(1.0 / ratio, self.tolerance):
            return StrategyResult.flag(
                f"Suspiciously consistent addition/deletion ratio: {ratio:.2f} "
                "- may indicate template-based generation"
            )

        return StrategyResult.clean()


class FileDispersionStrategy(BaseStrategy):
    name = "file_extension_analysis"

    def _detect(self, pair: CommitPair, repo_stats: RepositoryStats) -> StrategyResult:
        stats = pair.stats
        if stats.files_changed <= 10 or stats.additions <= 1000:
            return StrategyResult.clean()

        avg_lines_per_file = stats.additions / stats.files_changed
        if not 50 < avg_lines_per_file < 200:
            return StrategyResult.clean()

        consistency = 1.0 - (avg_lines_per_file - int(avg_lines_per_file))
        if consistency > 0.8:
            return StrategyResult.flag(
                f"Suspicious file creation pattern: {stats.files_changed} files with consistent size "
                f"(~{avg_lines_per_file:.0f} lines each) - may be generated"
            )
        return StrategyResult.clean()
