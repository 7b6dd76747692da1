"""
Version control system (VCS) integration.

This package contains the Git client used to read commit history and
per-commit diffstats.
"""

from .git_client import CommitRecord, CommitStats, FetchError, GitClient, GitError  # noqa: F401
