#!/usr/bin/env python
"""
Thin wrapper script to invoke the changelog_sync CLI.

Running ``python sync_changelog.py`` is equivalent to running the
``changelog-sync`` console script installed via ``pyproject.toml``.
"""

from changelog_sync.cli import main


if __name__ == "__main__":
    main(prog_name="changelog-sync")
