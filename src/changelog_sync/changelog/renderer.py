"""
Markdown rendering of commit history and Unreleased entries.
"""

from __future__ import annotations

from typing import Callable, List, Mapping, Optional

from changelog_sync.grouping.group_model import CommitBuckets
from changelog_sync.vcs.git_client import CommitRecord, CommitStats


StatsLookup = Callable[[str], CommitStats]


def render_commit(commit: CommitRecord, stats: Optional[CommitStats] = None) -> str:
    lines = [
        f"- **{commit.hash}** - {commit.message}",
        f"  - Author: {commit.author} ({commit.email})",
        f"  - Date: {commit.date}",
    ]
    if stats is not None and stats.files_changed > 0:
        lines.append(
            f"  - Files: {stats.files_changed} changed, "
            f"{stats.insertions} insertions(+), {stats.deletions} deletions(-)"
        )
    return "\n".join(lines) + "\n\n"


def render_history(
    groups: Mapping[str, List[CommitRecord]],
    stats_for: Optional[StatsLookup] = None,
) -> str:
    """Render date groups for the commit history section, newest date first.

    ``stats_for`` is called once per commit; without it no Files line is
    written.
    """
    parts: List[str] = []
    for day in sorted(groups, reverse=True):
        parts.append(f"### {day}\n")
        for commit in groups[day]:
            stats = stats_for(commit.hash) if stats_for is not None else None
            parts.append(render_commit(commit, stats))
    return "".join(parts)


def render_unreleased(buckets: CommitBuckets) -> str:
    """Render one ``### <Category>`` list per non-empty bucket."""
    parts: List[str] = []
    for category, commits in buckets.items():
        if not commits:
            continue
        parts.append(f"### {category}\n")
        parts.extend(f"- {commit.message} ({commit.hash})\n" for commit in commits)
        parts.append("\n")
    return "".join(parts)
