"""
Git client implementation for changelog_sync.

This module wraps the small set of read-only Git operations the changelog
updater needs: listing commits (optionally after a known revision) and
reading the diffstat summary of a single commit. All subprocess calls go
through :meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


LOG_FIELD_SEPARATOR = "|"
# Committer date rendered in local time, so the day of every commit follows
# the order git log emits them in (barring clock skew between committers).
LOG_FORMAT = LOG_FIELD_SEPARATOR.join(["%h", "%cd", "%an", "%ae", "%s"])

# Fragments of git's stderr when the ``since`` revision cannot be resolved,
# e.g. after a rebase or when the changelog was copied from another repo.
UNKNOWN_REVISION_MARKERS = (
    "bad revision",
    "unknown revision",
    "bad object",
    "invalid revision range",
)

_STAT_PATTERN = re.compile(
    r"(\d+) files? changed"
    r"(?:, (\d+) insertions?\(\+\))?"
    r"(?:, (\d+) deletions?\(-\))?"
)
_DAY_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class CommitRecord:
    """A single commit as reported by ``git log``."""

    hash: str
    date: str  # ISO-8601 committer timestamp
    author: str
    email: str
    message: str

    @property
    def day(self) -> str:
        """Calendar date (``YYYY-MM-DD``) the commit was made on, in local time."""
        match = _DAY_PATTERN.match(self.date)
        if match:
            return match.group(0)
        return self.date.split("T")[0].split(" ")[0]


@dataclass(frozen=True)
class CommitStats:
    """Diffstat summary of one commit."""

    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class FetchError(GitError):
    """Raised when the commit log cannot be read."""

    pass


def parse_commits(output: str) -> List[CommitRecord]:
    """Parse ``git log`` output produced with :data:`LOG_FORMAT`.

    The subject is the last field and may itself contain the separator, so
    everything after the fourth separator is joined back into the message.
    """
    commits: List[CommitRecord] = []
    for line in output.strip().splitlines():
        if not line.strip():
            continue
        fields = line.split(LOG_FIELD_SEPARATOR)
        if len(fields) < 5:
            logger.debug("Skipping malformed log line: %r", line)
            continue
        hash_, date, author, email = (field.strip() for field in fields[:4])
        message = LOG_FIELD_SEPARATOR.join(fields[4:]).strip()
        commits.append(
            CommitRecord(hash=hash_, date=date, author=author, email=email, message=message)
        )
    return commits


def parse_stat_summary(output: str) -> CommitStats:
    """Extract file/insertion/deletion counts from ``git show --stat`` output.

    Only the final non-empty line (the summary) is considered. Anything that
    does not look like a summary yields zero stats.
    """
    lines = [line for line in output.strip().splitlines() if line.strip()]
    if not lines:
        return CommitStats()
    match = _STAT_PATTERN.search(lines[-1])
    if not match:
        return CommitStats()
    files, insertions, deletions = (int(group or 0) for group in match.groups())
    return CommitStats(files_changed=files, insertions=insertions, deletions=deletions)


class GitClient:
    """Client for reading history from a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If git cannot be started or the command exits with a
            non-zero status.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except OSError as e:
            logger.error("Unable to execute git: %s", e)
            raise GitError(f"Unable to execute git: {e}") from e

        if result.returncode != 0:
            logger.debug(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def _log(self, since: Optional[str]) -> List[CommitRecord]:
        args = ["log"]
        if since:
            args.append(f"{since}..HEAD")
        args += [f"--pretty=format:{LOG_FORMAT}", "--date=iso-strict-local"]
        result = self._run(args)
        return parse_commits(result.stdout)

    def get_commits(self, since: Optional[str] = None) -> List[CommitRecord]:
        """Return commits newer than ``since`` (or all commits), newest first.

        Parameters
        ----------
        since : str, optional
            Revision of the most recently recorded commit. When git does not
            know this revision the full history is returned instead.

        Raises
        ------
        FetchError
            If ``git log`` fails for any other reason.
        """
        try:
            return self._log(since)
        except GitError as exc:
            message = str(exc).lower()
            if since and any(marker in message for marker in UNKNOWN_REVISION_MARKERS):
                logger.warning(
                    "Revision %s is unknown to git; reading the full history instead", since
                )
                try:
                    return self._log(None)
                except GitError as retry_exc:
                    logger.error("Failed to read git history: %s", retry_exc)
                    raise FetchError(str(retry_exc)) from retry_exc
            logger.error("Failed to read git history: %s", exc)
            raise FetchError(str(exc)) from exc

    def get_commit_stats(self, commit_hash: str) -> CommitStats:
        """Return the diffstat summary of ``commit_hash``.

        Stats are advisory; any failure yields zero counts.
        """
        try:
            result = self._run(["show", "--stat", "--format=", commit_hash])
        except GitError as exc:
            logger.debug("Could not read stats for %s: %s", commit_hash, exc)
            return CommitStats()
        return parse_stat_summary(result.stdout)
