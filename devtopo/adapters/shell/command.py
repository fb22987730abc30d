"""
Shell process runner — execute a command line and capture its output.

The command and argument string are joined and run through the shell,
so quoted paths in the argument string behave as they would on a
terminal. stderr is merged into stdout. Output that is not valid UTF-8
(code-page build logs) is decoded with replacement characters.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from devtopo.adapters.base import ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)

# Exit code reported when the command could not be started at all
EXIT_NOT_STARTED = 127
# Exit code reported when the command ran past its timeout
EXIT_TIMED_OUT = -1


class ShellProcessRunner(ProcessRunner):
    """Run commands with ``subprocess.run`` and capture combined output.

    Args:
        timeout: Seconds before the command is killed. None waits forever;
            builds are not cancellable once started.
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self, command: str) -> bool:
        return shutil.which(command) is not None

    def run(self, command: str, args: str = "", cwd: str | None = None) -> ProcessResult:
        command_line = f"{command} {args}".strip()
        logger.debug("Executing: %s (cwd=%s)", command_line, cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                command_line,
                shell=True,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            partial = e.output or ""
            if isinstance(partial, bytes):
                partial = partial.decode("utf-8", errors="replace")
            return ProcessResult(
                command=command,
                args=args,
                exit_code=EXIT_TIMED_OUT,
                output=partial + f"\nCommand timed out after {self._timeout}s",
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        except OSError as e:
            return ProcessResult(
                command=command,
                args=args,
                exit_code=EXIT_NOT_STARTED,
                output=f"Command execution error: {e}",
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        except Exception as e:
            logger.error("Runner raised while executing %s: %s", command_line, e)
            return ProcessResult(
                command=command,
                args=args,
                exit_code=EXIT_NOT_STARTED,
                output=f"Command execution error: {e}",
                duration_ms=int((time.monotonic() - start) * 1000),
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("%s exited with %d in %dms", command, result.returncode, elapsed_ms)
        return ProcessResult(
            command=command,
            args=args,
            exit_code=result.returncode,
            output=result.stdout or "",
            duration_ms=elapsed_ms,
        )
