"""
Mock command runner — scripted test double for every process spawn.

Returns exit code 0 with empty stdout for anything not scripted.
Responses are matched by exact command first, then by the longest
registered fragment contained in the command.
"""

from __future__ import annotations

from keyhash.adapters.base import CommandRunner
from keyhash.core.models.invocation import ToolInvocationResult, ToolInvocationSpec
from keyhash.core.services.platform_info import (
    EXIT_COMMAND_NOT_FOUND,
    HostPlatform,
)


class MockCommandRunner(CommandRunner):
    """Universal mock runner for testing.

    By default every command "succeeds". Configure per command with
    ``set_result``, ``set_exit``, ``set_missing`` or ``set_exception``.
    """

    def __init__(
        self,
        host: HostPlatform = HostPlatform.LINUX,
        default_stdout: str = "",
    ):
        super().__init__(host)
        self._default_stdout = default_stdout
        self._responses: dict[str, ToolInvocationResult | Exception] = {}
        self._call_log: list[ToolInvocationSpec] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[ToolInvocationSpec]:
        """All specs this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls_matching(self, fragment: str) -> list[ToolInvocationSpec]:
        """Specs whose command contains ``fragment``."""
        return [spec for spec in self._call_log if fragment in spec.command]

    def set_result(self, command: str, result: ToolInvocationResult) -> None:
        """Set a custom result for commands matching ``command``."""
        self._responses[command] = result

    def set_exit(self, command: str, exit_code: int, stdout: str = "") -> None:
        self._responses[command] = ToolInvocationResult.exited(exit_code, stdout)

    def set_missing(self, command: str) -> None:
        """Make a command look absent from PATH on this host."""
        code = 1 if self.host.is_windows else EXIT_COMMAND_NOT_FOUND
        self._responses[command] = ToolInvocationResult.exited(code)

    def set_timeout(self, command: str) -> None:
        self._responses[command] = ToolInvocationResult.timeout()

    def set_exception(self, command: str, error: Exception) -> None:
        """Make ``run`` raise, simulating a runner that breaks its contract."""
        self._responses[command] = error

    def run(self, spec: ToolInvocationSpec) -> ToolInvocationResult:
        self._call_log.append(spec)

        response = self._lookup(spec.command)
        if isinstance(response, Exception):
            raise response
        if response is not None:
            return response

        return ToolInvocationResult.exited(0, self._default_stdout)

    def reset(self) -> None:
        """Clear call log and scripted responses."""
        self._call_log.clear()
        self._responses.clear()

    def _lookup(self, command: str) -> ToolInvocationResult | Exception | None:
        if command in self._responses:
            return self._responses[command]
        fragments = sorted(
            (key for key in self._responses if key in command),
            key=len,
            reverse=True,
        )
        if fragments:
            return self._responses[fragments[0]]
        return None
