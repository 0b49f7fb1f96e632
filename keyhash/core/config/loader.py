"""
Configuration loader — reads keyhash.yml into the settings model.

The file is optional. When none is found, the defaults apply: debug
keystore in its platform location, SDK root from the environment.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from keyhash.core.models.settings import KeyHashSettings

logger = logging.getLogger(__name__)

# Default config filename
SETTINGS_FILE = "keyhash.yml"


class ConfigError(Exception):
    """Raised when keyhash.yml is unreadable or invalid."""


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for keyhash.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to keyhash.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None, *, search: bool = True) -> KeyHashSettings:
    """Load and validate settings.

    Args:
        path: Explicit path to keyhash.yml. If None, searches upward
            (unless ``search`` is False) and falls back to defaults.
        search: Whether to look for a settings file when ``path`` is None.

    Returns:
        Validated KeyHashSettings.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None and search:
        path = find_settings_file()

    if path is None:
        logger.debug("No %s found, using defaults", SETTINGS_FILE)
        return KeyHashSettings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return KeyHashSettings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "keyhash" key or be flat
    settings_data = data["keyhash"] if isinstance(data.get("keyhash"), dict) else data

    try:
        settings = KeyHashSettings.model_validate(settings_data)
    except Exception as e:
        raise ConfigError(f"Invalid keyhash configuration: {e}") from e

    # Relative keystore paths belong to the settings file, not the cwd
    settings = settings.anchored(path.resolve().parent)

    logger.info(
        "Loaded settings from %s (release keystore: %s)",
        path,
        "yes" if settings.release.configured else "no",
    )
    return settings
