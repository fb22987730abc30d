"""
Extension base — the contract for topology pre-processing hooks.

Extensions run before the transformation pass. They may add services,
add dependency edges and set host options. They must be safe to apply
twice: injection is reconciled by service name.
"""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from devtopo.core.models import Application, HostOptions, Service

logger = logging.getLogger(__name__)


class OperationKind(str, enum.Enum):
    """What the user is doing with the application."""

    LOCAL_RUN = "local-run"
    DEPLOY = "deploy"


class ExtensionConfiguration(BaseModel):
    """An extension entry from the application description.

    ``data`` is free-form. Absent or wrong-typed keys read as "not set".
    """

    name: str
    data: dict[str, Any] = Field(default_factory=dict)

    def get_str(self, key: str) -> str | None:
        """A non-empty string value, or None."""
        value = self.data.get(key)
        if isinstance(value, str) and value:
            return value
        return None

    def get_int(self, key: str) -> int | None:
        """An int value, or None (bools are not ints here)."""
        value = self.data.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None


@dataclass
class ExtensionContext:
    """Everything an extension may read or mutate."""

    application: Application
    operation: OperationKind = OperationKind.LOCAL_RUN
    output: logging.Logger = field(default_factory=lambda: logger)

    @property
    def options(self) -> HostOptions:
        return self.application.options


class Extension(ABC):
    """Abstract base class for extensions.

    To create a new extension:
        1. Subclass Extension
        2. Implement name and process
        3. Register it in the ExtensionRegistry
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The name used in the ``extensions:`` section."""

    @abstractmethod
    def process(self, context: ExtensionContext, config: ExtensionConfiguration) -> None:
        """Mutate the topology. Must be idempotent."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


def inject_dependency_service(application: Application, service: Service) -> bool:
    """Add ``service`` and make every other service depend on it.

    Reconciles by name: if a service with that name already exists,
    nothing changes.

    Returns:
        True if the service was added.
    """
    if service.name in application:
        return False

    application.add_service(service)
    for other in application.services.values():
        if other is service:
            continue
        other.dependencies.add(service.name)
    return True
