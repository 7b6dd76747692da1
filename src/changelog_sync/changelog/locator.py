"""
Find the newest commit already recorded in a changelog.
"""

from __future__ import annotations

import re
from typing import Optional

from changelog_sync.changelog.document import parse_changelog


# First bold hash below the first date subsection of the history section.
_HISTORY_HASH_PATTERN = re.compile(
    r"^### \d{4}-\d{2}-\d{2}.*?\*\*([0-9a-f]{4,40})\*\*", re.MULTILINE | re.DOTALL
)
# Older documents only carried a single "**Commit:** `abc1234`" field.
_COMMIT_FIELD_PATTERN = re.compile(r"\*\*Commit:\*\* `([0-9a-f]{4,40})`")


def find_last_recorded_commit(text: str) -> Optional[str]:
    """Return the most recently recorded commit hash, or None on a first run.

    Parameters
    ----------
    text : str
        Full changelog content.

    Returns
    -------
    Optional[str]
        The hash found at the top of the ``## Commit History`` section,
        else the value of a ``**Commit:**`` field, else None.
    """
    document = parse_changelog(text)
    if document.has_history:
        match = _HISTORY_HASH_PATTERN.search(document.history_entries)
        if match:
            return match.group(1)
    match = _COMMIT_FIELD_PATTERN.search(text)
    if match:
        return match.group(1)
    return None
