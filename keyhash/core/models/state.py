"""
SetupState — the resolver's cached outcome.

Owned by a single KeyHashResolver. Other components only see
snapshots via ``KeyHashResolver.state``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from keyhash.core.models.cause import ErrorCause


@dataclass
class SetupState:
    """Memoised resolution result plus the latest failure cause."""

    resolved_key_hash: str | None = None
    last_failure_cause: ErrorCause = ErrorCause.NONE

    @property
    def resolved(self) -> bool:
        return self.resolved_key_hash is not None

    def record_failure(self, cause: ErrorCause) -> None:
        """Overwrite the active cause. A resolved state never degrades."""
        if self.resolved:
            return
        self.last_failure_cause = cause

    def record_success(self, key_hash: str) -> None:
        self.resolved_key_hash = key_hash
        self.last_failure_cause = ErrorCause.NONE

    def snapshot(self) -> SetupState:
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "resolved_key_hash": self.resolved_key_hash,
            "last_failure_cause": self.last_failure_cause.value,
        }
