"""
Top-level package for changelog_sync.

This package exposes the main CLI entry point via the
``changelog_sync.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
