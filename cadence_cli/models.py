from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Tuple


@dataclass(frozen=True)
class Commit:
    """A single commit as read from history."""

    hash: str
    author: str
    message: str
    timestamp: datetime

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


@dataclass(frozen=True)
class DiffStats:
    additions: int = 0
    deletions: int = 0
    files_changed: int = 0

    def __post_init__(self):
        if self.additions < 0 or self.deletions < 0 or self.files_changed < 0:
            raise ValueError("diff stats must be non-negative")


@dataclass(frozen=True)
class CommitPair:
    """The before/after snapshot bounding one commit's change.

    ``diff_content`` is best-effort unified patch text and may be empty; every
    strategy falls back to message-only heuristics when it is.
    """

    previous: Commit
    current: Commit
    stats: DiffStats
    time_delta: timedelta
    diff_content: str = ""


@dataclass(frozen=True)
class RepositoryStats:
    """Running, repository-wide totals. Strategies only ever read these."""

    total_commits: int = 0
    total_additions: int = 0
    total_deletions: int = 0
    total_files_changed: int = 0

    @property
    def average_additions(self) -> float:
        return self.total_additions / self.total_commits if self.total_commits else 0.0

    @property
    def average_deletions(self) -> float:
        return self.total_deletions / self.total_commits if self.total_commits else 0.0

    def updated(self, pair: CommitPair) -> "RepositoryStats":
        return RepositoryStats(
            total_commits=self.total_commits + 1,
            total_additions=self.total_additions + pair.stats.additions,
            total_deletions=self.total_deletions + pair.stats.deletions,
            total_files_changed=self.total_files_changed + pair.stats.files_changed,
        )


@dataclass(frozen=True)
class StrategyResult:
    detected: bool
    reason: str = ""

    def __post_init__(self):
        # reason is present exactly when something was detected
        if self.detected != bool(self.reason):
            raise ValueError("reason must be non-empty iff detected is true")

    @classmethod
    def clean(cls) -> "StrategyResult":
        return cls(False, "")

    @classmethod
    def flag(cls, reason: str) -> "StrategyResult":
        return cls(True, reason)


@dataclass(frozen=True)
class Verdict:
    """Aggregated engine output for one commit pair."""

    flagged: bool
    triggered: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    score: float = 0.0
    total_strategies: int = 0

    @property
    def reasons(self) -> List[str]:
        return [reason for _, reason in self.triggered]

    def to_dict(self) -> dict:
        return {
            "flagged": self.flagged,
            "score": round(self.score, 3),
            "total_strategies": self.total_strategies,
            "triggered": [{"strategy": name, "reason": reason} for name, reason in self.triggered],
        }
