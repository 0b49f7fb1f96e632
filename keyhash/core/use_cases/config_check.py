"""
Config check use case — validate keyhash.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from keyhash.core.config.loader import ConfigError, find_settings_file, load_settings
from keyhash.core.models.settings import KeyHashSettings
from keyhash.core.services.platform_info import parse_platform


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    settings: KeyHashSettings | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        release = self.settings.release if self.settings else None
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "release_keystore": bool(release and release.configured),
            "keystore_path": self.settings.keystore_path if self.settings else "",
            "command_timeout": self.settings.timeout_seconds if self.settings else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate settings and report issues.

    A missing keyhash.yml is valid (defaults apply) but earns a warning.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_settings_file()
        if config_path is None:
            result.warnings.append("No keyhash.yml found. Using defaults.")

    result.config_path = config_path

    try:
        settings = load_settings(config_path, search=False)
        result.settings = settings
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    release = settings.release
    if release.half_configured:
        missing = "alias_name" if release.keystore_name else "keystore_name"
        result.warnings.append(
            f"Release keystore is missing '{missing}'. The debug keystore will be used."
        )

    if release.configured:
        # load_settings already anchored relative names to the file's directory
        keystore = Path(release.keystore_name).expanduser()
        if not keystore.is_file():
            result.warnings.append(f"Release keystore does not exist: {release.keystore_name}")
        if not release.keystore_pass or not release.alias_pass:
            result.warnings.append("Release keystore passwords are empty.")

    if settings.timeout_seconds is None:
        result.warnings.append(
            "command_timeout is disabled. A hung keytool will block forever."
        )

    if settings.platform and parse_platform(settings.platform) is None:
        result.errors.append(
            f"Unknown platform '{settings.platform}'. Use windows, macos or linux."
        )

    result.valid = len(result.errors) == 0
    return result
