"""
Key hash resolver — environment checks, then the keytool/openssl pipeline.

Resolution runs the preconditions in a fixed order and stops at the
first one that fails:

    1. Android SDK present          else  NO_SDK
    2. debug keystore present       else  NO_KEYSTORE
    3. openssl runs                 else  NO_OPENSSL
    4. keytool runs                 else  NO_KEYTOOL

Then it exports the signing certificate with keytool and pipes it
through ``openssl sha1 -binary | openssl base64``. Hashing and encoding
happen in those tools, never in this process.

State machine:

    Unresolved → Checking → Failed(cause)   (next call checks again)
                          → Resolved(hash)  (sticky for the resolver's life)

One resolver per process. Calls are serialised by a lock so that
concurrent callers never spawn the pipeline twice.
"""

from __future__ import annotations

import logging
import shlex
import threading
from collections.abc import Mapping

from keyhash.adapters.base import CommandRunner
from keyhash.core.models.cause import ErrorCause
from keyhash.core.models.invocation import KeystoreCredentials
from keyhash.core.models.settings import KeyHashSettings
from keyhash.core.models.state import SetupState
from keyhash.core.services.environment_probe import (
    KEYTOOL_PROBE,
    OPENSSL_PROBE,
    EnvironmentProbe,
)
from keyhash.core.services.error_reporter import describe
from keyhash.core.services.platform_info import (
    HostPlatform,
    detect_platform,
    exit_code_means_keytool_error,
)

logger = logging.getLogger(__name__)

DEBUG_KEY_ALIAS = "androiddebugkey"
DEBUG_KEY_PASSWORD = "android"

# Base64 SHA1 of zero bytes: what the pipeline prints when keytool
# exported nothing but the pipe's exit status came from openssl.
EMPTY_INPUT_KEY_HASH = "2jmj7l5rSw0yVb/vlWAYkK/YBwk="

PIPELINE_TEMPLATE = (
    "keytool -storepass {store_password} -keypass {alias_password} "
    "-exportcert -alias {alias} -keystore {keystore} "
    "| openssl sha1 -binary | openssl base64"
)

_WINDOWS_SPECIAL = set(' \t&|<>^()"')


def _quote(value: str, host: HostPlatform) -> str:
    """Quote a pipeline argument only when the host shell needs it."""
    if host.is_windows:
        if value and not any(ch in _WINDOWS_SPECIAL for ch in value):
            return value
        return '"' + value.replace('"', '""') + '"'
    return shlex.quote(value)


def build_pipeline_command(
    credentials: KeystoreCredentials,
    host: HostPlatform,
    *,
    mask: bool = False,
) -> str:
    """The keytool | openssl | openssl command line for ``credentials``.

    With ``mask=True`` both passwords are replaced by ``***`` (for logs).
    """
    store_password = "***" if mask else _quote(credentials.store_password, host)
    alias_password = "***" if mask else _quote(credentials.alias_password, host)
    return PIPELINE_TEMPLATE.format(
        store_password=store_password,
        alias_password=alias_password,
        alias=_quote(credentials.alias, host),
        keystore=_quote(credentials.keystore_path, host),
    )


class KeyHashResolver:
    """Resolves and memoises the signing key hash.

    Args:
        settings: Loaded keyhash.yml settings.
        runner: Command runner used for probes and the pipeline.
        probe: Optional pre-built probe (defaults to one over ``runner``).
        environ: Environment mapping for home/SDK lookups (default: os.environ).
    """

    def __init__(
        self,
        settings: KeyHashSettings,
        runner: CommandRunner,
        probe: EnvironmentProbe | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ):
        self._settings = settings
        self._runner = runner
        self._probe = probe or EnvironmentProbe(settings, runner, environ=environ)
        self._state = SetupState()
        self._lock = threading.Lock()

    @property
    def host(self) -> HostPlatform:
        return self._runner.host

    @property
    def runner(self) -> CommandRunner:
        return self._runner

    @property
    def probe(self) -> EnvironmentProbe:
        return self._probe

    @property
    def state(self) -> SetupState:
        """Snapshot of the cached state (changes to it are not kept)."""
        with self._lock:
            return self._state.snapshot()

    # ── Public API ──────────────────────────────────────────────

    def resolve_key_hash(self) -> str | None:
        """Return the key hash, computing it on first success.

        Returns None on failure; ``current_failure_cause()`` says why.
        """
        with self._lock:
            if self._state.resolved:
                return self._state.resolved_key_hash

            try:
                key_hash, cause = self._attempt()
            except Exception:
                logger.exception("Key hash resolution failed unexpectedly")
                key_hash, cause = None, ErrorCause.INTERNAL_ERROR

            if key_hash is None:
                self._state.record_failure(cause)
                logger.info("Key hash not resolved: %s", cause.value)
                return None

            self._state.record_success(key_hash)
            logger.info("Key hash resolved")
            return key_hash

    def is_setup_complete(self) -> bool:
        """Whether a key hash can be resolved, resolving it if needed.

        A failed check leaves its cause in ``current_failure_cause()``.
        """
        return self.resolve_key_hash() is not None

    @property
    def resolved(self) -> bool:
        """Whether a key hash is already cached. Never runs a command."""
        with self._lock:
            return self._state.resolved

    def current_failure_cause(self) -> ErrorCause:
        with self._lock:
            return self._state.last_failure_cause

    def failure_message(self) -> str:
        """Remediation sentence for the current cause ("" when none)."""
        return describe(self.current_failure_cause(), self.host)

    def reset(self) -> None:
        """Forget the cached hash and cause."""
        with self._lock:
            self._state = SetupState()

    def select_credentials(self) -> KeystoreCredentials:
        """Release keystore when name and alias are both set, else debug."""
        release = self._settings.release
        if release.configured:
            store_password, alias_password = release.expanded_passwords()
            return KeystoreCredentials(
                alias=release.alias_name,
                store_password=store_password,
                alias_password=alias_password,
                keystore_path=release.keystore_name,
            )
        return KeystoreCredentials(
            alias=DEBUG_KEY_ALIAS,
            store_password=DEBUG_KEY_PASSWORD,
            alias_password=DEBUG_KEY_PASSWORD,
            keystore_path=self._probe.debug_keystore_path(),
            is_debug=True,
        )

    # ── Internals ───────────────────────────────────────────────

    def _attempt(self) -> tuple[str | None, ErrorCause]:
        if not self._probe.has_android_sdk():
            return None, ErrorCause.NO_SDK

        if not self._probe.has_keystore_file():
            return None, ErrorCause.NO_KEYSTORE

        cause = self._check_command(OPENSSL_PROBE, ErrorCause.NO_OPENSSL)
        if cause is not None:
            return None, cause

        cause = self._check_command(KEYTOOL_PROBE, ErrorCause.NO_KEYTOOL)
        if cause is not None:
            return None, cause

        return self._run_pipeline(self.select_credentials())

    def _check_command(self, command: str, missing: ErrorCause) -> ErrorCause | None:
        result = self._probe.probe(command)
        if result.timed_out:
            return ErrorCause.COMMAND_TIMEOUT
        if result.error:
            return ErrorCause.INTERNAL_ERROR
        if not self._probe.is_found(result):
            return missing
        return None

    def _run_pipeline(self, credentials: KeystoreCredentials) -> tuple[str | None, ErrorCause]:
        logger.debug("Using %s", credentials)
        spec = self._runner.build_spec(
            build_pipeline_command(credentials, self.host),
            capture_stdout=True,
            timeout=self._settings.timeout_seconds,
            display=build_pipeline_command(credentials, self.host, mask=True),
        )
        result = self._runner.run(spec)

        if result.timed_out:
            return None, ErrorCause.COMMAND_TIMEOUT
        if result.error or result.exit_code is None:
            return None, ErrorCause.INTERNAL_ERROR
        if exit_code_means_keytool_error(result.exit_code):
            return None, ErrorCause.KEYTOOL_ERROR

        key_hash = result.stdout.rstrip("\n")
        # Stricter than exit code 255 alone: the pipe reports openssl's
        # status, so a keytool that exported nothing still exits 0 here.
        # Such output is never a real key hash and is not cached.
        if not key_hash or key_hash == EMPTY_INPUT_KEY_HASH:
            logger.warning("keytool exported no certificate for alias %r", credentials.alias)
            return None, ErrorCause.KEYTOOL_ERROR

        return key_hash, ErrorCause.NONE


def create_resolver(
    settings: KeyHashSettings,
    runner: CommandRunner | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> KeyHashResolver:
    """Build the process-wide resolver with a real shell runner."""
    if runner is None:
        from keyhash.adapters.shell.command import ShellCommandRunner

        runner = ShellCommandRunner(detect_platform(settings.platform))
    return KeyHashResolver(settings, runner, environ=environ)
