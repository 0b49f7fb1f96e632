"""Adapters — process bindings for keytool and openssl.

Public re-exports for convenient access.
"""

from keyhash.adapters.base import CommandRunner
from keyhash.adapters.mock import MockCommandRunner
from keyhash.adapters.shell.command import ShellCommandRunner

__all__ = [
    "CommandRunner",
    "MockCommandRunner",
    "ShellCommandRunner",
]
