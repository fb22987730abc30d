"""
Binding and environment models — how a service is reached and configured.

Bindings are declared in the application description. Replica ports are
assigned later by the scheduler and are only read by this package.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Binding(BaseModel):
    """A network endpoint exposed by a service."""

    name: str | None = None
    protocol: str | None = None         # "http", "https", ...
    host: str | None = None
    port: int | None = None             # declared (host-side) port
    container_port: int | None = None   # port inside the container, if different
    replica_ports: list[int] = Field(default_factory=list)

    @property
    def effective_port(self) -> int | None:
        """The port a proxy should forward to: container port wins."""
        return self.container_port if self.container_port is not None else self.port


class EnvironmentVariable(BaseModel):
    """A single name/value pair handed verbatim to the executor.

    Duplicate names are allowed; the executor decides which one wins.
    """

    name: str
    value: str | None = None
