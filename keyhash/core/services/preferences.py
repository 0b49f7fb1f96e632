"""
Preference store and build-tools query — where the Android SDK lives.

Two collaborators of the environment probe:

    PreferenceStore  — the editor's SDK root preference and its
                       "use embedded SDK" flag.
    BuildTools       — which build support is installed per target,
                       and whether it ships an embedded SDK.

Both are read-only views over KeyHashSettings plus the environment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from keyhash.core.models.settings import KeyHashSettings

logger = logging.getLogger(__name__)

# Consulted in order when the preference itself is empty
SDK_ENV_VARS = ("ANDROID_SDK_ROOT", "ANDROID_HOME")

EMBEDDED_SDK_DIRNAME = "SDK"


class PreferenceStore:
    """SDK location preferences."""

    def __init__(self, settings: KeyHashSettings, environ: Mapping[str, str] | None = None):
        self._prefs = settings.preferences
        self._environ = os.environ if environ is None else environ

    def android_sdk_root(self) -> str:
        """The configured SDK root, or the first SDK env var that is set."""
        if self._prefs.android_sdk_root:
            return os.path.expanduser(self._prefs.android_sdk_root)
        for var in SDK_ENV_VARS:
            value = self._environ.get(var, "")
            if value:
                logger.debug("SDK root from $%s: %s", var, value)
                return value
        return ""

    def sdk_use_embedded(self) -> bool:
        return self._prefs.sdk_use_embedded


class BuildTools:
    """Installed build support, queried per target at runtime."""

    def __init__(self, settings: KeyHashSettings):
        self._settings = settings.build_tools

    @property
    def active_target(self) -> str:
        return self._settings.target

    def playback_engine_directory(self, target: str | None = None) -> str:
        """Install directory of the build support for ``target`` ("" if none)."""
        target = target or self.active_target
        return self._settings.playback_engine_dirs.get(target, "")

    def embedded_sdk_directory(self, target: str | None = None) -> str | None:
        """The SDK bundled with the target's build support, if it exists on disk."""
        engine_dir = self.playback_engine_directory(target)
        if not engine_dir:
            return None
        sdk_dir = Path(os.path.expanduser(engine_dir)) / EMBEDDED_SDK_DIRNAME
        if sdk_dir.is_dir():
            return str(sdk_dir)
        logger.debug("No embedded SDK at %s", sdk_dir)
        return None
