"""
Resolve use case — key hash or remediation, ready for display.
"""

from __future__ import annotations

from dataclasses import dataclass

from keyhash.core.models.cause import ErrorCause
from keyhash.core.services.error_reporter import remediation_for
from keyhash.core.services.key_hash_resolver import KeyHashResolver


@dataclass
class ResolveResult:
    """Outcome of one resolution request."""

    key_hash: str | None = None
    cause: ErrorCause = ErrorCause.NONE
    message: str = ""
    category: str = "none"
    keystore: str = ""
    alias: str = ""
    debug_keystore: bool = True

    @property
    def ok(self) -> bool:
        return self.key_hash is not None

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "key_hash": self.key_hash,
            "cause": self.cause.value,
            "message": self.message,
            "category": self.category,
            "keystore": self.keystore,
            "alias": self.alias,
            "debug_keystore": self.debug_keystore,
        }


def resolve(resolver: KeyHashResolver) -> ResolveResult:
    """Resolve the key hash and attach remediation on failure."""
    key_hash = resolver.resolve_key_hash()
    credentials = resolver.select_credentials()

    result = ResolveResult(
        key_hash=key_hash,
        keystore=credentials.keystore_path,
        alias=credentials.alias,
        debug_keystore=credentials.is_debug,
    )
    if key_hash is not None:
        return result

    cause = resolver.current_failure_cause()
    info = remediation_for(cause, resolver.host)
    result.cause = cause
    result.message = info["message"]
    result.category = info["category"]
    return result
