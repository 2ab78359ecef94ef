from cadence_cli.detectors.base import BaseStrategy, count_all, extract_added_lines
from cadence_cli.models import CommitPair, RepositoryStats, StrategyResult

_HANDLING_KEYWORDS = [
    # basic
    "try", "catch", "except", "throw", "throws",
    # general
    "error", "exception", "handle",
    # language idioms: Go, JS promises, Ruby
    "if err != nil", ".catch(", "rescue",
]

_MESSAGE_KEYWORDS = ["error", "exception", "try", "catch", "handle"]


class ErrorHandlingStrategy(BaseStrategy):
    """Flags large additions with too little, or suspiciously much, error handling."""

    name = "error_handling_analysis"

    def _detect(self, pair: CommitPair, repo_stats: RepositoryStats) -> StrategyResult:
        additions = pair.stats.additions

        if pair.diff_content and additions > 50:
            return self._analyze_code(pair.diff_content, additions)

        if not pair.diff_content and additions > 300:
            msg = pair.current.message.lower()
            if not any(keyword in msg for keyword in _MESSAGE_KEYWORDS):
                return StrategyResult.flag(
                    f"Large code addition ({additions} lines) with no error handling mentions "
                    "- AI often omits error handling"
                )

        return StrategyResult.clean()

    def _analyze_code(self, diff_content: str, additions: int) -> StrategyResult:
        added_lines = extract_added_lines(diff_content)
        if len(added_lines) < 20:
            return StrategyResult.clean()

        code = "\n".join(added_lines).lower()
        observed = count_all(code, _HANDLING_KEYWORDS)
        # roughly one check per 30 lines
        expected = len(added_lines) // 30

        if additions > 100 and observed < expected:
            return StrategyResult.flag(
                f"Large code addition ({additions} lines) with insufficient error handling "
                f"({observed} patterns, expected ~{expected}) - typical AI omission"
            )

        if observed > len(added_lines) // 5:
            return StrategyResult.flag(
                f"Excessive error handling patterns ({observed} in {len(added_lines)} lines) "
                "- may indicate AI over-compensation"
            )

        return StrategyResult.clean()
