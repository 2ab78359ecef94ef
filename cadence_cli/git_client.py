import fnmatch
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

import git

from cadence_cli.errors import GitRepositoryError
from cadence_cli.models import Commit, CommitPair, DiffStats, RepositoryStats

logger = logging.getLogger(__name__)


def get_repo(path: str = "."):
    try:
        return git.Repo(path, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as exc:
        raise GitRepositoryError(f"'{path}' is not a valid Git repository.") from exc


def get_commits(repo: git.Repo, max_count: int = 50, rev: Optional[str] = None):
    try:
        return list(repo.iter_commits(rev, max_count=max_count))
    except (ValueError, git.exc.GitCommandError):
        # ValueError implies no commits on the reference (like 'main' doesn't exist yet)
        return []


def is_excluded(path: Optional[str], exclude: Sequence[str]) -> bool:
    if not path:
        return False
    name = path.rsplit("/", 1)[-1]
    return any(fnmatch.fnmatch(path, pattern) or fnmatch.fnmatch(name, pattern) for pattern in exclude)


def to_commit(commit: git.Commit) -> Commit:
    return Commit(
        hash=commit.hexsha,
        author=commit.author.name or "",
        message=commit.message if isinstance(commit.message, str) else commit.message.decode("utf-8", "replace"),
        timestamp=commit.committed_datetime,
    )


def get_diff_stats(commit: git.Commit, exclude: Sequence[str] = ()) -> DiffStats:
    additions = deletions = files = 0
    for path, counts in commit.stats.files.items():
        if is_excluded(path, exclude):
            continue
        additions += counts.get("insertions", 0)
        deletions += counts.get("deletions", 0)
        files += 1
    return DiffStats(additions=additions, deletions=deletions, files_changed=files)


def get_commit_diff(parent: git.Commit, commit: git.Commit, exclude: Sequence[str] = ()) -> str:
    """Unified patch text (hunks only) between ``parent`` and ``commit``, minus excluded files."""
    chunks = []
    try:
        diffs = parent.diff(commit, create_patch=True)
    except git.exc.GitCommandError:
        # Happens on shallow clones at the boundary commit where the parent tree is missing
        return ""

    for d in diffs:
        if is_excluded(d.b_path or d.a_path, exclude):
            continue
        try:
            # This property access is where GitPython typically triggers the lazy evaluation
            chunks.append(d.diff.decode("utf-8"))
        except (ValueError, UnicodeDecodeError, AttributeError):
            pass  # binary files or decode errors

    return "\n".join(chunk.rstrip("\n") for chunk in chunks if chunk)


def build_pair(commit: git.Commit, exclude: Sequence[str] = ()) -> Optional[CommitPair]:
    """The pair bounding ``commit``; None for root commits."""
    if not commit.parents:
        return None
    parent = commit.parents[0]
    return CommitPair(
        previous=to_commit(parent),
        current=to_commit(commit),
        stats=get_diff_stats(commit, exclude),
        time_delta=commit.committed_datetime - parent.committed_datetime,
        diff_content=get_commit_diff(parent, commit, exclude),
    )


def with_running_stats(pairs: Iterable[CommitPair]) -> List[Tuple[CommitPair, RepositoryStats]]:
    """Attach to each pair the totals of every older pair.

    ``pairs`` is newest first, as history is walked; the result keeps that order.
    """
    ordered = list(pairs)
    stats = RepositoryStats()
    attached = []
    for pair in reversed(ordered):
        attached.append((pair, stats))
        stats = stats.updated(pair)
    attached.reverse()
    return attached


def build_commit_pairs(
    repo: git.Repo, max_count: int = 50, exclude_files: Sequence[str] = ()
) -> List[Tuple[CommitPair, RepositoryStats]]:
    pairs = []
    for commit in get_commits(repo, max_count):
        pair = build_pair(commit, exclude_files)
        if pair is None:
            logger.debug("Skipping root commit %s", commit.hexsha[:7])
            continue
        pairs.append(pair)
    return with_running_stats(pairs)
