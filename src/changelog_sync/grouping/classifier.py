"""
Heuristics for sorting commits into changelog categories.

The classifier looks only at how the commit subject starts. It is
intentionally simple and deterministic: a subject that begins with
"update" is always a change, even when the commit really adds a feature.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from changelog_sync.grouping.group_model import ADDED, CHANGED, FIXED, REMOVED, CommitBuckets
from changelog_sync.vcs.git_client import CommitRecord


# Evaluated in order; the first matching category wins.
KEYWORD_RULES = (
    (FIXED, ("fix", "bugfix")),
    (REMOVED, ("remove", "delete")),
    (CHANGED, ("update", "change", "modify")),
)


def classify_commit(message: str) -> str:
    """Return the changelog category for a commit message.

    Parameters
    ----------
    message : str
        The commit subject line.

    Returns
    -------
    str
        One of ``Added``, ``Changed``, ``Fixed`` or ``Removed``. Messages
        matching no keyword fall back to ``Added``.
    """
    lowered = message.lower()
    for category, prefixes in KEYWORD_RULES:
        if lowered.startswith(prefixes):
            return category
    return ADDED


def classify_commits(commits: Iterable[CommitRecord]) -> CommitBuckets:
    """Partition ``commits`` into :class:`CommitBuckets`, keeping their order."""
    buckets = CommitBuckets()
    for commit in commits:
        buckets.bucket(classify_commit(commit.message)).append(commit)
    return buckets


def group_by_date(commits: Iterable[CommitRecord]) -> Dict[str, List[CommitRecord]]:
    """Group commits by calendar date, preserving their original order."""
    grouped: Dict[str, List[CommitRecord]] = {}
    for commit in commits:
        grouped.setdefault(commit.day, []).append(commit)
    return grouped
