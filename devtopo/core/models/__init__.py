"""
Topology models — pydantic types for the application graph.

All models are re-exported here for convenient access:

    from devtopo.core.models import Application, Service, DockerRunInfo
"""

from devtopo.core.models.application import Application
from devtopo.core.models.binding import Binding, EnvironmentVariable
from devtopo.core.models.logs import ServiceLogs
from devtopo.core.models.options import HostOptions
from devtopo.core.models.run_info import (
    DockerRunInfo,
    DockerVolume,
    IngressRule,
    IngressRunInfo,
    ProjectRunInfo,
    RunInfo,
    framework_version,
)
from devtopo.core.models.service import Service, ServiceDescription, ServiceStatus

__all__ = [
    # application.py
    "Application",
    # binding.py
    "Binding",
    "EnvironmentVariable",
    # logs.py
    "ServiceLogs",
    # options.py
    "HostOptions",
    # run_info.py
    "DockerRunInfo",
    "DockerVolume",
    "IngressRule",
    "IngressRunInfo",
    "ProjectRunInfo",
    "RunInfo",
    "framework_version",
    # service.py
    "Service",
    "ServiceDescription",
    "ServiceStatus",
]
