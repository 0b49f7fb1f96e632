"""
Environment probe — read-only checks for the key hash toolchain.

Answers three questions, each independently:

    has_android_sdk()     — is an SDK root configured and present?
    has_keystore_file()   — does the debug keystore exist?
    command_exists(cmd)   — does a shell probe say the tool is there?

Nothing here writes to disk, and the predicates never raise.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from keyhash.adapters.base import CommandRunner
from keyhash.core.models.invocation import ToolInvocationResult
from keyhash.core.models.settings import KeyHashSettings
from keyhash.core.services.platform_info import (
    HostPlatform,
    default_debug_keystore,
    exit_code_means_found,
)
from keyhash.core.services.preferences import BuildTools, PreferenceStore

logger = logging.getLogger(__name__)

OPENSSL_PROBE = 'echo "xxx" | openssl base64'
KEYTOOL_PROBE = "keytool"


class EnvironmentProbe:
    """Toolchain presence checks for one host."""

    def __init__(
        self,
        settings: KeyHashSettings,
        runner: CommandRunner,
        *,
        preferences: PreferenceStore | None = None,
        build_tools: BuildTools | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self._settings = settings
        self._runner = runner
        self._environ = os.environ if environ is None else environ
        self._preferences = preferences or PreferenceStore(settings, self._environ)
        self._build_tools = build_tools or BuildTools(settings)

    @property
    def host(self) -> HostPlatform:
        return self._runner.host

    # ── SDK ─────────────────────────────────────────────────────

    def android_sdk_path(self) -> str:
        """Resolve the SDK root.

        The preference wins unless it is empty or the "use embedded"
        flag is set; then the SDK bundled with the active target's
        build support is used, when it exists.
        """
        sdk_path = self._preferences.android_sdk_root()
        if not sdk_path or self._preferences.sdk_use_embedded():
            embedded = self._build_tools.embedded_sdk_directory()
            if embedded:
                sdk_path = embedded
        return sdk_path

    def has_android_sdk(self) -> bool:
        try:
            sdk_path = self.android_sdk_path()
            return bool(sdk_path) and os.path.isdir(sdk_path)
        except OSError as e:
            logger.debug("SDK check failed: %s", e)
            return False

    # ── Keystore ────────────────────────────────────────────────

    def debug_keystore_path(self) -> str:
        if self._settings.keystore_path:
            return os.path.expanduser(self._settings.keystore_path)
        return default_debug_keystore(self.host, self._environ)

    def has_keystore_file(self) -> bool:
        try:
            return os.path.isfile(self.debug_keystore_path())
        except OSError as e:
            logger.debug("Keystore check failed: %s", e)
            return False

    # ── Commands ────────────────────────────────────────────────

    def probe(self, command: str) -> ToolInvocationResult:
        """Run a probe command with stdout discarded."""
        spec = self._runner.build_spec(
            command,
            capture_stdout=False,
            timeout=self._settings.timeout_seconds,
        )
        return self._runner.run(spec)

    def is_found(self, result: ToolInvocationResult) -> bool:
        """Apply the host's exit-code policy to a probe result."""
        if not result.completed:
            return False
        return exit_code_means_found(self.host, result.exit_code)

    def command_exists(self, command: str) -> bool:
        try:
            result = self.probe(command)
        except Exception as e:
            logger.debug("Probe %r raised: %s", command, e)
            return False
        found = self.is_found(result)
        logger.debug("Probe %r → exit %s, found=%s", command, result.exit_code, found)
        return found

    def has_openssl(self) -> bool:
        return self.command_exists(OPENSSL_PROBE)

    def has_keytool(self) -> bool:
        return self.command_exists(KEYTOOL_PROBE)
