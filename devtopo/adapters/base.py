"""
Adapter base — the contract between transforms and external tools.

Transforms never call ``subprocess`` directly. They hand a command to a
ProcessRunner and get a ProcessResult back. A non-zero exit code is data,
not an exception: runners NEVER raise for tool failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel


class ProcessResult(BaseModel):
    """Outcome of an external command.

    ``output`` holds stdout and stderr interleaved, as the tool wrote them.
    """

    command: str
    args: str = ""
    exit_code: int = 0
    output: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the command exited with 0."""
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return f"{self.command} {self.args}".strip()


class ProcessRunner(ABC):
    """Abstract base class for command runners.

    To create a new runner:
        1. Subclass ProcessRunner
        2. Implement name, is_available, run
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self, command: str) -> bool:
        """Check if ``command`` can be executed. Should be fast and never raise."""

    @abstractmethod
    def run(self, command: str, args: str = "", cwd: str | None = None) -> ProcessResult:
        """Run ``command`` with an argument string and capture its output.

        MUST never raise on non-zero exit. Failures to start the command
        are reported through ``exit_code`` and ``output`` as well.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
