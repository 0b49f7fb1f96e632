"""
Invocation models — the contract between callers and the command runner.

Callers build a ToolInvocationSpec, the runner returns a
ToolInvocationResult. The runner never raises for process faults:
spawn errors and timeouts are captured in the result.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ToolInvocationSpec(BaseModel):
    """A single shell-wrapped command to execute.

    Immutable, built per call and not retained.
    """

    model_config = ConfigDict(frozen=True)

    shell: str                      # "bash" or "cmd"
    shell_flag: str                 # "-c" or "/C"
    command: str
    capture_stdout: bool = True     # False = stdout discarded
    timeout: float | None = None    # seconds; None waits forever
    cwd: str | None = None          # None = current directory
    display: str = ""               # command text safe for logs

    @property
    def argv(self) -> list[str]:
        """Argument vector handed to the OS."""
        return [self.shell, self.shell_flag, self.command]

    @property
    def args(self) -> list[str] | str:
        """What ``subprocess`` receives.

        cmd.exe does not understand the ``\\"`` escapes that
        ``list2cmdline`` writes for a list, so it gets a prebuilt line
        in the ``/C "<command>"`` form instead. cmd strips the outer
        quotes and keeps the inner ones around paths with spaces.
        """
        if self.shell_flag.upper() == "/C":
            return f'{self.shell} {self.shell_flag} "{self.command}"'
        return self.argv

    @property
    def loggable(self) -> str:
        return self.display or self.command


class ToolInvocationResult(BaseModel):
    """Outcome of one command. Consumed once by the caller."""

    model_config = ConfigDict(frozen=True)

    exit_code: int | None = None
    stdout: str = ""
    timed_out: bool = False
    error: str | None = None        # spawn / I-O failure text
    duration_ms: int = 0

    @property
    def completed(self) -> bool:
        """Whether the process ran to exit and reported a code."""
        return self.exit_code is not None and not self.timed_out and self.error is None

    @classmethod
    def exited(cls, exit_code: int, stdout: str = "", **kwargs) -> ToolInvocationResult:
        return cls(exit_code=exit_code, stdout=stdout, **kwargs)

    @classmethod
    def timeout(cls, **kwargs) -> ToolInvocationResult:
        return cls(timed_out=True, **kwargs)

    @classmethod
    def failure(cls, error: str, **kwargs) -> ToolInvocationResult:
        return cls(error=error, **kwargs)


class KeystoreCredentials(BaseModel):
    """Signing credentials for one pipeline invocation. Never persisted."""

    model_config = ConfigDict(frozen=True)

    alias: str
    store_password: str
    alias_password: str
    keystore_path: str
    is_debug: bool = False

    def __repr__(self) -> str:
        return (
            f"KeystoreCredentials(alias={self.alias!r}, "
            f"keystore_path={self.keystore_path!r}, is_debug={self.is_debug}, "
            "store_password='***', alias_password='***')"
        )

    __str__ = __repr__
