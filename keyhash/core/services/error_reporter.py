"""
Error reporter — failure cause → remediation sentence.

Pure functions. The only input besides the cause is the host platform,
which decides which menu the SDK message points at.
"""

from __future__ import annotations

from keyhash.core.models.cause import ErrorCause
from keyhash.core.services.platform_info import HostPlatform, detect_platform

GENERIC_MESSAGE = "Your Android setup is not right. Check the documentation."

_MESSAGES: dict[ErrorCause, str] = {
    ErrorCause.NO_KEYSTORE: (
        "Your android debug keystore file is missing! You can create new one "
        "by creating and building empty Android project in Android Studio, or "
        "set keystore_path in keyhash.yml."
    ),
    ErrorCause.NO_KEYTOOL: (
        "Keytool not found. Make sure that Java is installed, and that Java "
        "tools are in your path."
    ),
    ErrorCause.NO_OPENSSL: (
        "OpenSSL not found. Make sure that OpenSSL is installed, and that it "
        "is in your path."
    ),
    ErrorCause.KEYTOOL_ERROR: "Unknown error while getting Debug Android Key Hash.",
    ErrorCause.COMMAND_TIMEOUT: (
        "Keytool or OpenSSL did not finish in time. Check that neither is "
        "waiting for input, or raise command_timeout in keyhash.yml."
    ),
    ErrorCause.INTERNAL_ERROR: (
        "Could not run the key hash tools. Run with --debug for details."
    ),
}

_CATEGORIES: dict[ErrorCause, str] = {
    ErrorCause.NO_SDK: "environment",
    ErrorCause.NO_KEYSTORE: "environment",
    ErrorCause.NO_OPENSSL: "environment",
    ErrorCause.NO_KEYTOOL: "environment",
    ErrorCause.KEYTOOL_ERROR: "tool",
    ErrorCause.COMMAND_TIMEOUT: "tool",
    ErrorCause.INTERNAL_ERROR: "internal",
}


def _sdk_message(host: HostPlatform) -> str:
    return (
        "You don't have the Android SDK setup!  Go to "
        f"{host.preferences_menu}->Preferences... and set your Android SDK "
        "Location under External Tools"
    )


def describe(cause: ErrorCause | str | None, host: HostPlatform | None = None) -> str:
    """Remediation sentence for a failure cause.

    ``None`` and ``ErrorCause.NONE`` give ``""``. Values that are not a
    known cause get the generic sentence.
    """
    if cause is None or cause == ErrorCause.NONE:
        return ""
    if not isinstance(cause, ErrorCause):
        parsed = ErrorCause.parse(str(cause))
        if parsed is None:
            return GENERIC_MESSAGE
        cause = parsed
        if cause is ErrorCause.NONE:
            return ""

    if cause is ErrorCause.NO_SDK:
        return _sdk_message(host or detect_platform())
    return _MESSAGES.get(cause, GENERIC_MESSAGE)


def remediation_for(cause: ErrorCause | str | None, host: HostPlatform | None = None) -> dict:
    """Structured form of ``describe`` for JSON output."""
    if cause is None:
        parsed: ErrorCause | None = ErrorCause.NONE
    elif isinstance(cause, ErrorCause):
        parsed = cause
    else:
        parsed = ErrorCause.parse(cause)

    if parsed is None:
        return {"cause": str(cause), "message": GENERIC_MESSAGE, "category": "unknown"}

    return {
        "cause": parsed.value,
        "message": describe(parsed, host),
        "category": _CATEGORIES.get(parsed, "none"),
    }
