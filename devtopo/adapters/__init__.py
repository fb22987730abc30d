"""Adapters — bindings for external tools.

Public re-exports for convenient access.
"""

from devtopo.adapters.base import ProcessResult, ProcessRunner
from devtopo.adapters.mock import MockProcessRunner
from devtopo.adapters.shell.command import ShellProcessRunner

__all__ = [
    "MockProcessRunner",
    "ProcessResult",
    "ProcessRunner",
    "ShellProcessRunner",
]
