"""
Mock process runner — test double for external commands.

Returns exit code 0 for everything by default. Can be configured per
command, or per argument substring (e.g. a project file name), to return
a custom exit code and output.
"""

from __future__ import annotations

import threading

from devtopo.adapters.base import ProcessResult, ProcessRunner


class MockProcessRunner(ProcessRunner):
    """Universal mock runner for testing.

    Matching order: the first ``set_result`` rule whose command matches and
    whose ``match`` substring occurs in the argument string wins.
    """

    def __init__(
        self,
        runner_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = runner_name
        self._available = available
        self._default_output = default_output
        self._rules: list[tuple[str, str, int, str]] = []
        self._calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def calls(self) -> list[tuple[str, str]]:
        """All (command, args) pairs this mock has received."""
        with self._lock:
            return list(self._calls)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def is_available(self, command: str) -> bool:
        return self._available

    def set_result(
        self,
        command: str,
        exit_code: int = 0,
        output: str = "",
        match: str = "",
    ) -> None:
        """Configure the result for ``command`` (optionally narrowed by ``match``)."""
        with self._lock:
            self._rules.append((command, match, exit_code, output))

    def set_failure(self, command: str, exit_code: int = 1, output: str = "Mock failure", match: str = "") -> None:
        """Configure ``command`` to fail."""
        self.set_result(command, exit_code=exit_code, output=output, match=match)

    def run(self, command: str, args: str = "", cwd: str | None = None) -> ProcessResult:
        with self._lock:
            self._calls.append((command, args))
            rules = list(self._rules)

        for rule_command, match, exit_code, output in rules:
            if rule_command == command and match in args:
                return ProcessResult(command=command, args=args, exit_code=exit_code, output=output)

        return ProcessResult(command=command, args=args, exit_code=0, output=self._default_output)

    def reset(self) -> None:
        """Clear call log and configured results."""
        with self._lock:
            self._calls.clear()
            self._rules.clear()
