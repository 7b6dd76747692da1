"""
Configuration loader for changelog_sync.

Settings may be stored in an optional JSON file named
``.changelog_sync.json`` in the repository root. Every key is optional;
a missing file simply yields the defaults. A malformed file, or a key
with a value of the wrong type, raises :class:`ConfigError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings or logging errors in
# environments where the root logger may be closed. When the CLI configures
# logging, messages still appear.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_FILENAME = ".changelog_sync.json"

DEFAULTS: Dict[str, Any] = {
    "changelog": "CHANGELOG.md",
    "include_stats": True,
}


class ConfigError(Exception):
    """Raised when the configuration file is malformed or invalid."""

    pass


def load_config(repo_root: Path) -> Dict[str, Any]:
    """Load the changelog_sync configuration for ``repo_root``.

    Args:
        repo_root: Root directory of the Git repository.

    Returns:
        A dictionary with the keys:
        - changelog (str): Changelog path, relative to the repository root
        - include_stats (bool): Whether to add per-commit diffstats

    Raises:
        ConfigError: If the configuration file exists but is invalid.
    """
    config = dict(DEFAULTS)
    config_path = repo_root / CONFIG_FILENAME

    if not config_path.exists():
        logger.debug("No configuration file at %s; using defaults", config_path)
        return config

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))

    if "changelog" in data:
        if not isinstance(data["changelog"], str) or not data["changelog"].strip():
            raise ConfigError("'changelog' must be a non-empty string")
        config["changelog"] = data["changelog"]
    if "include_stats" in data:
        if not isinstance(data["include_stats"], bool):
            raise ConfigError("'include_stats' must be a boolean")
        config["include_stats"] = data["include_stats"]

    logger.debug("Loaded configuration from: %s", config_path)
    logger.debug("Configuration data: %s", config)
    return config
