"""
ErrorCause — why the last key hash resolution did not produce a value.

Every expected failure is one of these values, never an exception.
The string values are stable identifiers (used in ``--json`` output
and accepted by ``keyhash explain``).
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCause(StrEnum):
    """Failure causes, one active at a time."""

    NONE = "none"

    # Environment not ready; the operator fixes these
    NO_SDK = "no_android_sdk"
    NO_KEYSTORE = "no_android_keystore"
    NO_OPENSSL = "no_openssl"
    NO_KEYTOOL = "no_java_keytool"

    # Tool ran but failed
    KEYTOOL_ERROR = "java_keytool_error"
    COMMAND_TIMEOUT = "command_timeout"

    # Spawn failure, I/O error, anything unexpected
    INTERNAL_ERROR = "internal_error"

    @property
    def is_failure(self) -> bool:
        return self is not ErrorCause.NONE

    @classmethod
    def parse(cls, value: str) -> ErrorCause | None:
        """Look up a cause by value or member name (case-insensitive)."""
        needle = value.strip().lower()
        for cause in cls:
            if needle in (cause.value, cause.name.lower()):
                return cause
        return None
