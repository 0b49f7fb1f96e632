"""
Doctor use case — run every precondition and report each one.

Unlike resolution, the doctor does not stop at the first failure and
never runs the hash pipeline, so one run lists everything to fix.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from keyhash.core.models.cause import ErrorCause
from keyhash.core.services.environment_probe import (
    KEYTOOL_PROBE,
    OPENSSL_PROBE,
    EnvironmentProbe,
)
from keyhash.core.services.error_reporter import describe


@dataclass
class CheckResult:
    """One precondition."""

    name: str
    passed: bool
    detail: str = ""
    cause: ErrorCause = ErrorCause.NONE
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "passed": self.passed,
            "detail": self.detail,
            "cause": self.cause.value,
            "message": self.message,
        }


@dataclass
class DoctorResult:
    """All preconditions, in resolution order."""

    platform: str = ""
    checks: list[CheckResult] = field(default_factory=list)

    @property
    def ready(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def first_failure(self) -> CheckResult | None:
        return next((c for c in self.checks if not c.passed), None)

    def to_dict(self) -> dict:
        first = self.first_failure
        return {
            "ready": self.ready,
            "platform": self.platform,
            "first_failure": first.cause.value if first else None,
            "checks": [c.to_dict() for c in self.checks],
        }


def run_doctor(probe: EnvironmentProbe) -> DoctorResult:
    """Check the SDK, keystore, openssl and keytool independently."""
    host = probe.host
    result = DoctorResult(platform=host.value)

    def add(name: str, passed: bool, detail: str, cause: ErrorCause) -> None:
        result.checks.append(CheckResult(
            name=name,
            passed=passed,
            detail=detail,
            cause=ErrorCause.NONE if passed else cause,
            message="" if passed else describe(cause, host),
        ))

    sdk_path = probe.android_sdk_path()
    add("android_sdk", probe.has_android_sdk(), sdk_path or "(not configured)", ErrorCause.NO_SDK)

    keystore = probe.debug_keystore_path()
    add("debug_keystore", probe.has_keystore_file(), keystore, ErrorCause.NO_KEYSTORE)

    add("openssl", probe.command_exists(OPENSSL_PROBE), OPENSSL_PROBE, ErrorCause.NO_OPENSSL)
    add("keytool", probe.command_exists(KEYTOOL_PROBE), KEYTOOL_PROBE, ErrorCause.NO_KEYTOOL)

    return result
