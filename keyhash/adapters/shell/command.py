"""
Shell command runner — execute shell-wrapped commands and capture stdout.

The SINGLE PLACE where ``subprocess`` is called. stdout is captured
(or discarded), stderr is inherited from the parent so keytool and
openssl diagnostics reach the user's terminal.
"""

from __future__ import annotations

import logging
import subprocess
import time

from keyhash.adapters.base import CommandRunner
from keyhash.core.models.invocation import ToolInvocationResult, ToolInvocationSpec

logger = logging.getLogger(__name__)


class ShellCommandRunner(CommandRunner):
    """Run commands through ``bash -c`` or ``cmd /C``."""

    @property
    def name(self) -> str:
        return "shell"

    def run(self, spec: ToolInvocationSpec) -> ToolInvocationResult:
        logger.debug("Executing: %s %s %s", spec.shell, spec.shell_flag, spec.loggable)
        start = time.monotonic()

        try:
            result = subprocess.run(
                spec.args,
                stdout=subprocess.PIPE if spec.capture_stdout else subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
                cwd=spec.cwd,
                text=True,
                timeout=spec.timeout,
            )
        except subprocess.TimeoutExpired:
            # subprocess.run kills the child before re-raising
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.warning("Command timed out after %ss: %s", spec.timeout, spec.loggable)
            return ToolInvocationResult.timeout(duration_ms=elapsed_ms)
        except OSError as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.error("Cannot start %s: %s", spec.shell, e)
            return ToolInvocationResult.failure(
                f"Cannot start {spec.shell}: {e}",
                duration_ms=elapsed_ms,
            )
        except UnicodeDecodeError as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.error("Undecodable output from %s: %s", spec.loggable, e)
            return ToolInvocationResult.failure(
                f"Undecodable output: {e}",
                duration_ms=elapsed_ms,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, spec.loggable)

        return ToolInvocationResult.exited(
            result.returncode,
            result.stdout or "",
            duration_ms=elapsed_ms,
        )
