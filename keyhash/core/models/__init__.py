"""
Domain models — pydantic types for key hash resolution.

All models are re-exported here for convenient access:

    from keyhash.core.models import ErrorCause, KeyHashSettings, SetupState
"""

from keyhash.core.models.cause import ErrorCause
from keyhash.core.models.invocation import (
    KeystoreCredentials,
    ToolInvocationResult,
    ToolInvocationSpec,
)
from keyhash.core.models.settings import (
    BuildToolsSettings,
    KeyHashSettings,
    ReleaseKeystore,
    SdkPreferences,
)
from keyhash.core.models.state import SetupState

__all__ = [
    "BuildToolsSettings",
    # cause.py
    "ErrorCause",
    # settings.py
    "KeyHashSettings",
    # invocation.py
    "KeystoreCredentials",
    "ReleaseKeystore",
    "SdkPreferences",
    # state.py
    "SetupState",
    "ToolInvocationResult",
    "ToolInvocationSpec",
]
