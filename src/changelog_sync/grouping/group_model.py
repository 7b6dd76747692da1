"""
Data models for commit grouping.

The :class:`CommitBuckets` holds the result of classifying a batch of
commits into the changelog categories used by the Unreleased section.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from changelog_sync.vcs.git_client import CommitRecord


ADDED = "Added"
CHANGED = "Changed"
FIXED = "Fixed"
REMOVED = "Removed"

# Order in which categories are rendered.
CATEGORIES = (ADDED, CHANGED, FIXED, REMOVED)


@dataclass
class CommitBuckets:
    """Commits partitioned by changelog category.

    Attributes
    ----------
    added, changed, fixed, removed : List[CommitRecord]
        Commits of each category, in fetch order (newest first).
    """

    added: List[CommitRecord] = field(default_factory=list)
    changed: List[CommitRecord] = field(default_factory=list)
    fixed: List[CommitRecord] = field(default_factory=list)
    removed: List[CommitRecord] = field(default_factory=list)

    def bucket(self, category: str) -> List[CommitRecord]:
        """Return the list backing ``category``."""
        if category not in CATEGORIES:
            raise KeyError(category)
        return getattr(self, category.lower())

    def items(self) -> Iterator[Tuple[str, List[CommitRecord]]]:
        """Yield ``(category, commits)`` pairs in rendering order."""
        for category in CATEGORIES:
            yield category, self.bucket(category)

    def __len__(self) -> int:
        return sum(len(commits) for _, commits in self.items())
