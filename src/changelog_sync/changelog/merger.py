"""
Merge newly fetched commits into an existing changelog.

Two independent edits are applied to the parsed document:

* the rendered date groups are placed at the top of the
  ``## Commit History`` section, which is created at the end of the
  document when missing;
* the classification of the new commits goes below the ``## [Unreleased]``
  heading, when present. Entries an earlier run rendered at the top of
  that section are replaced so they do not pile up; hand-written content
  after them is kept below the new entries.

Sections are bounded by the next ``## `` heading or ``---`` rule.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from changelog_sync.changelog.document import (
    HISTORY_HEADER,
    UNRELEASED_HEADER,
    Block,
    ChangelogDocument,
    parse_changelog,
)
from changelog_sync.changelog.renderer import StatsLookup, render_history, render_unreleased
from changelog_sync.grouping.classifier import classify_commits, group_by_date
from changelog_sync.vcs.git_client import CommitRecord


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


_GENERATED_LINE = re.compile(
    r"^(?:### (?:Added|Changed|Fixed|Removed)|- .* \([0-9a-f]{4,40}\))$"
)


@dataclass(frozen=True)
class MergeResult:
    """Outcome of :func:`merge_commits`."""

    text: str
    added: int

    @property
    def changed(self) -> bool:
        return self.added > 0


def _merge_history(document: ChangelogDocument, rendered: str) -> ChangelogDocument:
    index = document.index_of(HISTORY_HEADER)
    if index is None:
        logger.debug("No '%s' section found; appending one", HISTORY_HEADER)
        return document.with_appended(Block(heading_line=HISTORY_HEADER + "\n", body="\n" + rendered))
    existing = document.blocks[index].body.lstrip("\n")
    return document.with_body(index, "\n" + rendered + existing)


def hand_written_unreleased(body: str) -> str:
    """Return ``body`` without the entries a previous run rendered at its top.

    Everything from the first line that is neither blank nor a generated
    heading or entry onwards is returned untouched.
    """
    lines = body.splitlines(keepends=True)
    for position, line in enumerate(lines):
        if line.strip() and not _GENERATED_LINE.match(line.rstrip()):
            return "".join(lines[position:])
    return ""


def _merge_unreleased(document: ChangelogDocument, rendered: str) -> ChangelogDocument:
    index = document.index_of(UNRELEASED_HEADER)
    if index is None:
        return document
    kept = hand_written_unreleased(document.blocks[index].body)
    if kept:
        logger.debug("Keeping hand-written content below '%s'", UNRELEASED_HEADER)
    return document.with_body(index, "\n" + rendered + kept)


def merge_commits(
    text: str,
    commits: Sequence[CommitRecord],
    stats_for: Optional[StatsLookup] = None,
) -> MergeResult:
    """Return the changelog ``text`` with ``commits`` merged in.

    Parameters
    ----------
    text : str
        Current changelog content.
    commits : Sequence[CommitRecord]
        New commits, newest first.
    stats_for : callable, optional
        Looks up the diffstat of a commit hash for the history section.

    Returns
    -------
    MergeResult
        The new text and the number of commits added. With no commits the
        text is returned unchanged.
    """
    if not commits:
        return MergeResult(text=text, added=0)

    document = parse_changelog(text)
    document = _merge_history(document, render_history(group_by_date(commits), stats_for))
    document = _merge_unreleased(document, render_unreleased(classify_commits(commits)))
    return MergeResult(text=document.serialize(), added=len(commits))
