"""
Settings model — everything the resolver reads from its collaborators.

Loaded from keyhash.yml. Every field is optional: an empty file (or
no file at all) means "debug keystore in the default location, SDK
from the environment".
"""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath, PureWindowsPath

from pydantic import BaseModel, Field

DEFAULT_COMMAND_TIMEOUT = 120.0


def _anchor(value: str, base_dir: Path) -> str:
    """``value`` made absolute against ``base_dir`` when it is a plain relative path.

    Empty values and home-relative (``~``) paths are left as they are.
    """
    if not value or value.startswith("~"):
        return value
    if PurePosixPath(value).is_absolute() or PureWindowsPath(value).is_absolute():
        return value
    return str(base_dir / value)


class ReleaseKeystore(BaseModel):
    """Release signing settings of the Android build.

    Used only when both ``keystore_name`` and ``alias_name`` are set.
    Passwords may reference environment variables (``$STORE_PASS``).
    """

    keystore_name: str = ""
    keystore_pass: str = ""
    alias_name: str = ""
    alias_pass: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.keystore_name) and bool(self.alias_name)

    @property
    def half_configured(self) -> bool:
        return bool(self.keystore_name) != bool(self.alias_name)

    def expanded_passwords(self) -> tuple[str, str]:
        """Store and alias passwords with ``$VAR`` references expanded."""
        return os.path.expandvars(self.keystore_pass), os.path.expandvars(self.alias_pass)


class SdkPreferences(BaseModel):
    """Editor preferences that locate the Android SDK."""

    android_sdk_root: str = ""
    sdk_use_embedded: bool = False


class BuildToolsSettings(BaseModel):
    """Installed build tooling, per build target.

    ``playback_engine_dirs`` maps a target name to the directory of its
    installed build support; an embedded SDK lives in ``<dir>/SDK``.
    """

    target: str = "android"
    playback_engine_dirs: dict[str, str] = Field(default_factory=dict)


class KeyHashSettings(BaseModel):
    """Root settings model — loaded from keyhash.yml."""

    version: int = 1

    keystore_path: str = ""         # debug keystore override
    release: ReleaseKeystore = Field(default_factory=ReleaseKeystore)
    preferences: SdkPreferences = Field(default_factory=SdkPreferences)
    build_tools: BuildToolsSettings = Field(default_factory=BuildToolsSettings)

    platform: str | None = None     # host override: windows, macos, linux
    command_timeout: float | None = DEFAULT_COMMAND_TIMEOUT

    @property
    def timeout_seconds(self) -> float | None:
        """Bounded wait for child processes; None disables it."""
        if not self.command_timeout or self.command_timeout <= 0:
            return None
        return self.command_timeout

    def anchored(self, base_dir: Path) -> KeyHashSettings:
        """Copy with relative keystore paths resolved against ``base_dir``.

        keytool resolves relative paths against the cwd, which may be any
        directory below the one holding keyhash.yml.
        """
        release = self.release.model_copy(
            update={"keystore_name": _anchor(self.release.keystore_name, base_dir)},
        )
        return self.model_copy(update={
            "keystore_path": _anchor(self.keystore_path, base_dir),
            "release": release,
        })
