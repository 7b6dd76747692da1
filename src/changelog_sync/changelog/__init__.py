"""
Changelog handling: parsing, locating the last sync point, rendering and
merging new commits.
"""

from .document import ChangelogError, load_changelog, parse_changelog, save_changelog  # noqa: F401
from .locator import find_last_recorded_commit  # noqa: F401
from .merger import MergeResult, merge_commits  # noqa: F401
