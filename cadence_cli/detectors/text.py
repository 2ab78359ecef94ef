from cadence_cli.detectors.base import BaseStrategy
from cadence_cli.models import CommitPair, RepositoryStats, StrategyResult

# Phrasing assistants reach for when summarising their own output
_AI_PATTERNS = [
    "implement",
    "add functionality",
    "update code",
    "refactor code",
    "improve implementation",
    "enhance functionality",
    "optimize performance",
    "fix issues",
    "improve code quality",
    "add new features",
    "update implementation",
    "add support for",
]

# Template messages that say nothing about the change
_GENERIC_PATTERNS = [
    "initial commit",
    "update readme",
    "update dependencies",
    "minor fixes",
    "code cleanup",
    "bug fixes",
    "improvements",
    "updates",
    "changes",
    "modifications",
]


class CommitMessageStrategy(BaseStrategy):
    """Flags generic or AI-style commit message phrasing."""

    name = "commit_message_analysis"

    def _detect(self, pair: CommitPair, repo_stats: RepositoryStats) -> StrategyResult:
        msg = pair.current.message.lower()

        ai_score = sum(1 for pattern in _AI_PATTERNS if pattern in msg)
        generic_score = sum(1 for pattern in _GENERIC_PATTERNS if pattern in msg)

        if ai_score >= 2 or generic_score >= 1:
            return StrategyResult.flag(
                "Suspicious commit message patterns - generic/AI-like phrasing "
                f"(AI patterns: {ai_score}, generic: {generic_score})"
            )

        # long but says nothing specific
        if len(msg.split()) > 8 and ("implement" in msg or "functionality" in msg):
            return StrategyResult.flag("Overly verbose yet generic commit message - typical of AI generation")

        return StrategyResult.clean()
