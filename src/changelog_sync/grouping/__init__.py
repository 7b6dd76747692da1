"""
Grouping logic for commits.

This package sorts commits into changelog categories and groups them by
date. See :mod:`changelog_sync.grouping.classifier` and
:mod:`changelog_sync.grouping.group_model` for details.
"""

from .classifier import classify_commit, classify_commits, group_by_date  # noqa: F401
from .group_model import CommitBuckets  # noqa: F401
