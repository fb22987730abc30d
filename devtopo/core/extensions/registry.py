"""
Extension registry — lookup and ordered application of extensions.

The registry starts with the well-known extensions. Extensions run in
the order they are listed in the application description.
"""

from __future__ import annotations

import logging

from devtopo.core.extensions.base import (
    Extension,
    ExtensionConfiguration,
    ExtensionContext,
    OperationKind,
)
from devtopo.core.extensions.elastic import ElasticStackExtension
from devtopo.core.models import Application

logger = logging.getLogger(__name__)


class ExtensionError(Exception):
    """Raised when a configured extension is not registered."""


class ExtensionRegistry:
    """Central registry of extensions, keyed by name."""

    def __init__(self, *, well_known: bool = True):
        self._extensions: dict[str, Extension] = {}
        if well_known:
            self.register(ElasticStackExtension())

    def register(self, extension: Extension) -> None:
        name = extension.name
        if name in self._extensions:
            logger.warning("Overwriting existing extension: %s", name)
        self._extensions[name] = extension
        logger.debug("Registered extension: %s", name)

    def unregister(self, name: str) -> None:
        self._extensions.pop(name, None)

    def get(self, name: str) -> Extension | None:
        return self._extensions.get(name)

    def list_extensions(self) -> list[str]:
        return list(self._extensions.keys())

    def apply(
        self,
        application: Application,
        configs: list[ExtensionConfiguration],
        operation: OperationKind = OperationKind.LOCAL_RUN,
    ) -> None:
        """Run each configured extension against the application.

        Raises:
            ExtensionError: If a configured extension is unknown.
        """
        context = ExtensionContext(application=application, operation=operation)
        for config in configs:
            extension = self._extensions.get(config.name)
            if extension is None:
                raise ExtensionError(
                    f"Unknown extension '{config.name}'. "
                    f"Available: {', '.join(sorted(self._extensions)) or 'none'}"
                )
            logger.debug("Applying extension %s (%s)", config.name, operation.value)
            extension.process(context, config)
