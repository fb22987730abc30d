"""Extensions — pluggable topology pre-processing.

Public re-exports for convenient access.
"""

from devtopo.core.extensions.base import (
    Extension,
    ExtensionConfiguration,
    ExtensionContext,
    OperationKind,
    inject_dependency_service,
)
from devtopo.core.extensions.elastic import ElasticStackExtension
from devtopo.core.extensions.registry import ExtensionError, ExtensionRegistry

__all__ = [
    "ElasticStackExtension",
    "Extension",
    "ExtensionConfiguration",
    "ExtensionContext",
    "ExtensionError",
    "ExtensionRegistry",
    "OperationKind",
    "inject_dependency_service",
]
