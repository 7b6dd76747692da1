"""
Command line interface for the changelog_sync tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``changelog-sync`` command. It locates the Git
repository, loads the configuration, finds the newest commit already
recorded in the changelog, fetches the commits made since, and merges
them into the document. The document is written once, at the very end,
so any failure leaves the file on disk untouched.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from changelog_sync import __version__
from changelog_sync.changelog.document import (
    CHANGELOG_TEMPLATE,
    ChangelogError,
    load_changelog,
    save_changelog,
)
from changelog_sync.changelog.locator import find_last_recorded_commit
from changelog_sync.changelog.merger import merge_commits
from changelog_sync.config.loader import ConfigError, load_config
from changelog_sync.vcs.git_client import GitClient, GitError

# Create a module-level logger. Attach a null handler and disable
# propagation to avoid logging errors when the root logger's stream is
# closed (such as during unit tests).
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_FAILURE = 1


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def resolve_changelog_path(option: Optional[Path], repo_root: Path, config: dict) -> Path:
    """Pick the changelog location.

    An explicit ``--changelog`` option wins; otherwise the configured path
    is taken relative to the repository root.
    """
    if option is not None:
        return option
    return repo_root / config["changelog"]


def read_or_create(path: Path, create: bool) -> Tuple[str, bool]:
    """Return ``(text, created)`` for the changelog at ``path``.

    A missing file is an error unless ``create`` is set, in which case a
    fresh skeleton is used.
    """
    if not path.exists() and create:
        return CHANGELOG_TEMPLATE, True
    return load_changelog(path), False


@click.command()
@click.option(
    "--changelog",
    "changelog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Changelog file to update (default: CHANGELOG.md in the repository root).",
)
@click.option(
    "--repo",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory inside the Git repository (default: current directory).",
)
@click.option("--no-stats", is_flag=True, help="Do not add per-commit file statistics.")
@click.option("--create", is_flag=True, help="Create the changelog if it does not exist.")
@click.option("--dry-run", is_flag=True, help="Print the updated changelog instead of writing it.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="changelog-sync")
def main(
    changelog_path: Optional[Path],
    repo: Optional[Path],
    no_stats: bool,
    create: bool,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Append new git commits to a changelog without duplicating entries.

    New commits go to the top of the "## Commit History" section and are
    summarised under "## [Unreleased]" as Added, Changed, Fixed or Removed.
    """
    # Use force=True to ensure handlers are reconfigured on subsequent
    # invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    total_steps = 4
    try:
        # Step 1: Detect repository
        print_step(1, total_steps, "Detecting Repository")
        start = repo if repo is not None else Path.cwd()
        repo_root = GitClient.find_repo_root(start)
        if repo_root is None:
            print_error(f"No Git repository found at {start} or its parent directories.")
            raise click.exceptions.Exit(EXIT_FAILURE)
        print_success(f"Found Git repository at: {repo_root}")

        try:
            config = load_config(repo_root)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_FAILURE)
        include_stats = config["include_stats"] and not no_stats
        path = resolve_changelog_path(changelog_path, repo_root, config)
        logger.debug("Changelog: %s, stats: %s", path, include_stats)

        # Step 2: Find the last recorded commit
        print_step(2, total_steps, f"Reading {path.name}")
        text, created = read_or_create(path, create)
        if created:
            print_info(f"{path.name} does not exist; starting from a new changelog")
        last_commit = find_last_recorded_commit(text)
        print_info(f"Last recorded commit: {last_commit or 'none (will add all commits)'}")

        # Step 3: Fetch new commits
        print_step(3, total_steps, "Fetching Commits")
        client = GitClient(repo_root)
        commits = client.get_commits(last_commit)
        print_success(f"Found {len(commits)} commit(s) to add")

        # Step 4: Merge and write
        print_step(4, total_steps, f"Updating {path.name}")
        stats_for = client.get_commit_stats if include_stats else None
        result = merge_commits(text, commits, stats_for=stats_for)

        if dry_run:
            print_warning("Dry run: the changelog was not written")
            click.echo(result.text, nl=False)
            return

        if result.changed or created:
            save_changelog(path, result.text)
        if result.changed:
            print_success(f"Updated {path.name} with {result.added} new commit(s)")
        else:
            print_info("No new commits to add.")

    except click.exceptions.Exit:
        raise
    except GitError as exc:
        print_error(f"Git error: {exc}")
        raise click.exceptions.Exit(EXIT_FAILURE)
    except ChangelogError as exc:
        print_error(f"Changelog error: {exc}")
        raise click.exceptions.Exit(EXIT_FAILURE)
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Error updating changelog: {exc}")
        raise click.exceptions.Exit(EXIT_FAILURE)
