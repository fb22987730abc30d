"""
Application model — the root of the topology.

Services are keyed by name. Dict insertion order is kept, which makes
rule indices and report ordering deterministic.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from devtopo.core.models.options import HostOptions
from devtopo.core.models.service import Service


class Application(BaseModel):
    """A set of uniquely named services plus shared run options."""

    name: str = ""
    source: str | None = None   # config file the topology was loaded from
    services: dict[str, Service] = Field(default_factory=dict)
    options: HostOptions = Field(default_factory=HostOptions)

    def add_service(self, service: Service) -> None:
        """Add a service. Names must be unique."""
        if service.name in self.services:
            raise ValueError(f"Duplicate service name: {service.name!r}")
        self.services[service.name] = service

    def get(self, name: str) -> Service | None:
        """Look up a service by name."""
        return self.services.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.services
