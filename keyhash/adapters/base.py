"""
Command runner base — the contract between the resolver and processes.

The probe and resolver only talk to external tools through this
interface, never through ``subprocess`` directly, so every spawn can
be replaced by a scripted double in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from keyhash.core.models.invocation import ToolInvocationResult, ToolInvocationSpec
from keyhash.core.services.platform_info import HostPlatform


class CommandRunner(ABC):
    """Abstract base class for command runners.

    Runners block until the child exits (or the invocation's timeout expires).
    They NEVER raise for process faults: spawn errors and timeouts are
    captured in the ToolInvocationResult.
    """

    def __init__(self, host: HostPlatform):
        self._host = host

    @property
    def host(self) -> HostPlatform:
        return self._host

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def run(self, spec: ToolInvocationSpec) -> ToolInvocationResult:
        """Execute the invocation synchronously and return its result."""

    def build_spec(
        self,
        command: str,
        *,
        capture_stdout: bool = True,
        timeout: float | None = None,
        display: str = "",
    ) -> ToolInvocationSpec:
        """Wrap a command string in this host's shell."""
        shell, flag = self._host.shell
        return ToolInvocationSpec(
            shell=shell,
            shell_flag=flag,
            command=command,
            capture_stdout=capture_stdout,
            timeout=timeout,
            display=display,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} host={self._host.value}>"
