from cadence_cli.detectors.base import BaseStrategy
from cadence_cli.models import CommitPair, RepositoryStats, StrategyResult

BURST_WINDOW_SECONDS = 300
BURST_MIN_ADDITIONS = 50


class BurstPatternStrategy(BaseStrategy):
    """Flags a substantial commit landing within five minutes of the previous one.

    ``max_commits_per_hour`` only switches the strategy on (> 0); a true
    per-hour rate needs more history than a single pair carries.
    """

    name = "burst_pattern_analysis"

    def __init__(self, max_commits_per_hour: int = 10, enabled: bool = True):
        super().__init__(enabled and max_commits_per_hour > 0)
        self.max_commits_per_hour = max_commits_per_hour

    def _detect(self, pair: CommitPair, repo_stats: RepositoryStats) -> StrategyResult:
        seconds = pair.time_delta.total_seconds()
        if seconds < BURST_WINDOW_SECONDS and pair.stats.additions > BURST_MIN_ADDITIONS:
            return StrategyResult.flag(
                f"Rapid commit pattern: {seconds:.1f} seconds between substantial commits "
                "- may indicate batch processing"
            )
        return StrategyResult.clean()
