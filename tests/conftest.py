from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List

import git
import pytest  # type: ignore[import]

from cadence_cli.models import Commit, CommitPair, DiffStats, RepositoryStats

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_pair(
    message: str = "Fix parser crash on empty input",
    additions: int = 10,
    deletions: int = 5,
    files_changed: int = 1,
    seconds: float = 3600,
    diff: str = "",
) -> CommitPair:
    previous = Commit(hash="a" * 40, author="Jane Doe", message="Previous work", timestamp=BASE_TIME)
    current = Commit(
        hash="b" * 40,
        author="Jane Doe",
        message=message,
        timestamp=BASE_TIME + timedelta(seconds=seconds),
    )
    return CommitPair(
        previous=previous,
        current=current,
        stats=DiffStats(additions=additions, deletions=deletions, files_changed=files_changed),
        time_delta=timedelta(seconds=seconds),
        diff_content=diff,
    )


def added(lines: List[str]) -> str:
    """Render lines as the added side of a unified diff hunk."""
    return "\n".join(["@@ -0,0 +1,%d @@" % len(lines)] + ["+" + line for line in lines])


@pytest.fixture()
def repo_stats() -> RepositoryStats:
    return RepositoryStats()


def commit_files(repo: git.Repo, files: Dict[str, str], message: str, when: str) -> git.Commit:
    actor = git.Actor("Jane Doe", "jane@example.com")
    root = Path(repo.working_tree_dir)
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    repo.index.add(list(files))
    return repo.index.commit(message, author=actor, committer=actor, author_date=when, commit_date=when)


@pytest.fixture()
def sample_repo(tmp_path) -> git.Repo:
    """Three commits: a root, a small follow-up, and a large burst two minutes later."""
    repo = git.Repo.init(tmp_path / "repo")
    commit_files(repo, {"app.py": "print('hello')\n"}, "Initial import", "2024-03-01T10:00:00+0000")
    commit_files(
        repo,
        {"app.py": "print('hello')\nprint('world')\n", "package-lock.json": "{}\n" * 40},
        "Print a second greeting",
        "2024-03-01T11:00:00+0000",
    )
    body = "".join(f"value_{i} = compute({i})\n" for i in range(80))
    commit_files(repo, {"bulk.py": body}, "minor fixes", "2024-03-01T11:02:00+0000")
    return repo
