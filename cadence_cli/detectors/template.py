"""
Template Pattern Engine
───────────────────────
Generated scaffolding has a recognisable texture. Four independent signals are
scored over the added lines of a diff:

  - template comments: "todo", "placeholder", "your code here", ...
    (one point per distinct phrase found)
  - repetition: adjacent lines differing in at most two word positions
  - indentation uniformity: nearly every line sits on a handful of levels
  - import-heavy additions: many imports, little code

Two or more points flag the commit. When the diff does not flag (or is
missing) the commit message is checked for scaffold vocabulary instead.
"""

from collections import Counter
from typing import List

from cadence_cli.detectors.base import BaseStrategy, extract_added_lines
from cadence_cli.models import CommitPair, RepositoryStats, StrategyResult

_TEMPLATE_COMMENTS = [
    "todo", "fixme", "placeholder", "implement", "add code here",
    "your code here", "example", "sample", "template", "boilerplate",
]

_MESSAGE_KEYWORDS = [
    "boilerplate", "template", "skeleton", "scaffold", "stub", "placeholder", "todo", "fixme",
]


def _indent_width(line: str) -> int:
    width = 0
    for ch in line:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += 4
        else:
            break
    return width


def count_similar_adjacent(lines: List[str]) -> int:
    """Adjacent pairs of >10-char lines with the same (>3) word count and <=2 differing words."""
    similar = 0
    for first, second in zip(lines, lines[1:]):
        first, second = first.strip(), second.strip()
        if len(first) <= 10 or len(second) <= 10:
            continue
        words1, words2 = first.split(), second.split()
        if len(words1) != len(words2) or len(words1) <= 3:
            continue
        differences = sum(1 for a, b in zip(words1, words2) if a != b)
        if differences <= 2:
            similar += 1
    return similar


def has_uniform_indentation(lines: List[str]) -> bool:
    total = len(lines)
    if total <= 20:
        return False
    levels = Counter(_indent_width(line) for line in lines if line.strip())
    covered = sum(count for count in levels.values() if count > total // 10)
    return covered / total > 0.9


class TemplatePatternStrategy(BaseStrategy):
    name = "template_pattern_analysis"

    def _detect(self, pair: CommitPair, repo_stats: RepositoryStats) -> StrategyResult:
        additions = pair.stats.additions

        if pair.diff_content and additions > 50:
            result = self._analyze_code(pair.diff_content)
            if result.detected:
                return result

        msg = pair.current.message.lower()
        matches = sum(1 for keyword in _MESSAGE_KEYWORDS if keyword in msg)
        if matches > 0 and additions > 100:
            return StrategyResult.flag(
                f"Template/boilerplate patterns detected in large commit ({additions} lines) "
                "- may be AI-generated scaffold"
            )
        return StrategyResult.clean()

    def _analyze_code(self, diff_content: str) -> StrategyResult:
        added_lines = extract_added_lines(diff_content)
        if len(added_lines) < 10:
            return StrategyResult.clean()

        lowered = "\n".join(added_lines).lower()
        suspicious = sum(1 for phrase in _TEMPLATE_COMMENTS if phrase in lowered)

        if count_similar_adjacent(added_lines) > len(added_lines) // 8:
            suspicious += 1

        if has_uniform_indentation(added_lines):
            suspicious += 1

        import_lines = [line for line in added_lines if "import" in line.lower()]
        if len(import_lines) > 5 and len(added_lines) < len(import_lines) * 10:
            suspicious += 1

        if suspicious >= 2:
            return StrategyResult.flag(
                f"Template/generated code patterns detected ({suspicious} indicators) "
                "- repetitive structure, perfect formatting, template comments"
            )
        return StrategyResult.clean()
