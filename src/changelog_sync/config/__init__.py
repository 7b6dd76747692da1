"""
Configuration loading for changelog_sync.

Provides a loader for the optional ``.changelog_sync.json`` file located
in the repository root. See :mod:`changelog_sync.config.loader` for
implementation details.
"""

from .loader import ConfigError, load_config  # noqa: F401
