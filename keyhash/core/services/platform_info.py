"""
Host platform — OS family, shell selection, exit-code policy, home dir.

The OS family is queried at runtime (``platform.system()``) and can be
overridden from settings, so Windows behaviour is testable on any host.
"""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping
from enum import StrEnum

# POSIX shells report "command not found" as 127
EXIT_COMMAND_NOT_FOUND = 127

# keytool failures surface as 255 from the hash pipeline
EXIT_KEYTOOL_ERROR = 255


class HostPlatform(StrEnum):
    """OS families with distinct shell and path conventions."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"

    @property
    def is_windows(self) -> bool:
        return self is HostPlatform.WINDOWS

    @property
    def shell(self) -> tuple[str, str]:
        """(shell executable, flag preceding the command string)."""
        if self.is_windows:
            return "cmd", "/C"
        return "bash", "-c"

    @property
    def preferences_menu(self) -> str:
        """Menu that holds the editor preferences on this platform."""
        return "Unity" if self is HostPlatform.MACOS else "Edit"


_ALIASES = {
    "windows": HostPlatform.WINDOWS,
    "win32": HostPlatform.WINDOWS,
    "nt": HostPlatform.WINDOWS,
    "darwin": HostPlatform.MACOS,
    "macos": HostPlatform.MACOS,
    "osx": HostPlatform.MACOS,
    "linux": HostPlatform.LINUX,
}


def parse_platform(name: str) -> HostPlatform | None:
    """Map a platform name or alias (``darwin``, ``win32``...) to a family."""
    return _ALIASES.get(name.strip().lower())


def detect_platform(override: str | None = None) -> HostPlatform:
    """Identify the host OS family.

    Args:
        override: Optional name from settings (``windows``, ``macos``, ``linux``).
            Unknown names fall back to detection.
    """
    if override:
        match = parse_platform(override)
        if match is not None:
            return match
    system = platform.system().lower()
    if system.startswith(("cygwin", "msys", "mingw")):
        return HostPlatform.WINDOWS
    # Anything else POSIX-like behaves as linux for our purposes
    return _ALIASES.get(system, HostPlatform.LINUX)


def exit_code_means_found(host: HostPlatform, exit_code: int) -> bool:
    """Whether a probe's exit code says the tool exists.

    Windows: only 0 counts. POSIX: anything but 127, because a
    non-zero code from a tool that ran means "exists but errored".
    """
    if host.is_windows:
        return exit_code == 0
    return exit_code != EXIT_COMMAND_NOT_FOUND


def exit_code_means_keytool_error(exit_code: int) -> bool:
    return exit_code == EXIT_KEYTOOL_ERROR


def home_directory(host: HostPlatform, environ: Mapping[str, str] | None = None) -> str:
    """User home directory, derived from the platform's env vars."""
    env = os.environ if environ is None else environ
    if host.is_windows:
        return env.get("HOMEDRIVE", "") + env.get("HOMEPATH", "")
    return env.get("HOME") or os.path.expanduser("~")


def default_debug_keystore(host: HostPlatform, environ: Mapping[str, str] | None = None) -> str:
    """Conventional location of the auto-generated debug keystore."""
    home = home_directory(host, environ)
    if host.is_windows:
        return home + "\\.android\\debug.keystore"
    return home + "/.android/debug.keystore"
