"""Transformation engine — turns declared services into runnable containers."""

from devtopo.core.engine.build import transform_project_to_container
from devtopo.core.engine.ingress import IngressRoute, transform_ingress_to_container
from devtopo.core.engine.transform import TransformProjectsIntoContainers, TransformReport

__all__ = [
    "IngressRoute",
    "TransformProjectsIntoContainers",
    "TransformReport",
    "transform_ingress_to_container",
    "transform_project_to_container",
]
