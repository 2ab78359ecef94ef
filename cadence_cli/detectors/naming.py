import re

from cadence_cli.detectors.base import BaseStrategy, extract_added_lines
from cadence_cli.models import CommitPair, RepositoryStats, StrategyResult

_GENERIC_IDENTIFIERS = [
    "var1", "var2", "temp", "data", "result", "value", "item",
    "element", "obj", "instance", "helper", "utility", "manager",
]

_GENERIC_NOUNS = [
    "variable", "function", "method", "class", "object", "instance",
    "data", "result", "value", "item", "element", "component",
    "helper", "utility", "manager", "handler", "service",
]

_LOWER_START = re.compile(r"^[a-z]")
_UPPER = re.compile(r"[A-Z]")


def is_perfect_camel_case(word: str) -> bool:
    """Starts lowercase and holds exactly one ASCII capital: ``userName`` but not ``userNameId``."""
    if len(word) < 2 or not _LOWER_START.match(word):
        return False
    return len(_UPPER.findall(word)) == 1


class NamingPatternStrategy(BaseStrategy):
    """Looks for generic identifiers, TODO clusters and machine-regular naming."""

    name = "naming_pattern_analysis"

    def _detect(self, pair: CommitPair, repo_stats: RepositoryStats) -> StrategyResult:
        if pair.diff_content:
            return self._analyze_code(pair.diff_content)

        msg = pair.current.message.lower()
        name_count = sum(1 for noun in _GENERIC_NOUNS if noun in msg)
        if name_count >= 2:
            return StrategyResult.flag(
                f"Commit message contains multiple generic naming terms ({name_count}) "
                "- may indicate AI-generated variable names"
            )
        return StrategyResult.clean()

    def _analyze_code(self, diff_content: str) -> StrategyResult:
        added_lines = extract_added_lines(diff_content)
        if not added_lines:
            return StrategyResult.clean()

        code = "\n".join(added_lines)
        lowered = code.lower()
        suspicious = 0

        # each name counts once however often it repeats
        suspicious += sum(1 for pattern in _GENERIC_IDENTIFIERS if pattern in lowered)

        if lowered.count("todo") > 2 or lowered.count("fixme") > 1:
            suspicious += 1

        words = code.split()
        camel = sum(1 for word in words if len(word) > 4 and is_perfect_camel_case(word))
        if len(words) > 10 and camel / len(words) > 0.3:
            suspicious += 1

        if "catch" in code or "except" in code:
            handling = code.count("catch") + code.count("except") + code.count("try")
            if handling > len(added_lines) // 20:
                suspicious += 1

        if suspicious >= 2:
            return StrategyResult.flag(
                f"Code contains multiple AI-slop patterns ({suspicious} detected) "
                "- generic names, TODO comments, perfect patterns"
            )
        return StrategyResult.clean()
