"""
Service model — one node of the application topology.

A service has an immutable identity (its description name), a mutable
run-info that transforms replace, runtime status, dependency edges and
a log sink.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, PrivateAttr

from devtopo.core.models.binding import Binding, EnvironmentVariable
from devtopo.core.models.logs import ServiceLogs
from devtopo.core.models.run_info import RunInfo


class ServiceDescription(BaseModel):
    """Declared shape of a service."""

    name: str
    replicas: int = 1
    bindings: list[Binding] = Field(default_factory=list)
    configuration: list[EnvironmentVariable] = Field(default_factory=list)
    run_info: RunInfo | None = None

    def add_env(self, name: str, value: str | None) -> None:
        """Append an environment variable (duplicates are kept)."""
        self.configuration.append(EnvironmentVariable(name=name, value=value))

    def env(self, name: str) -> str | None:
        """Value of the last variable with this name, or None."""
        for var in reversed(self.configuration):
            if var.name == name:
                return var.value
        return None


class ServiceStatus(BaseModel):
    """Runtime metadata, filled in by transforms for observers."""

    project_file_path: str | None = None
    target_framework: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class Service(BaseModel):
    """A service in the application topology.

    ``dependencies`` only ever grows: transforms and extensions add
    edges, nothing removes them.
    """

    description: ServiceDescription
    status: ServiceStatus = Field(default_factory=ServiceStatus)
    dependencies: set[str] = Field(default_factory=set)

    _logs: ServiceLogs = PrivateAttr(default_factory=ServiceLogs)

    @property
    def name(self) -> str:
        return self.description.name

    @property
    def logs(self) -> ServiceLogs:
        """Per-service line sink (build output etc.)."""
        return self._logs

    @property
    def run_kind(self) -> str | None:
        """The run-info tag, or None when the service has nothing to run."""
        run_info = self.description.run_info
        return run_info.kind if run_info is not None else None
