"""
Shared test fixtures and configuration.
"""

from pathlib import Path
from typing import Callable

import pytest

from devtopo.adapters.mock import MockProcessRunner
from devtopo.core.config.options import TransformOptions
from devtopo.core.models import (
    Application,
    Binding,
    DockerRunInfo,
    IngressRule,
    IngressRunInfo,
    ProjectRunInfo,
    Service,
    ServiceDescription,
)


@pytest.fixture
def runner() -> MockProcessRunner:
    """A runner whose every command succeeds."""
    return MockProcessRunner(default_output="Build succeeded.")


@pytest.fixture
def options(tmp_path: Path) -> TransformOptions:
    """Default options with the proxy location pinned to a temp dir."""
    return TransformOptions(proxy_location=str(tmp_path / "proxy"))


@pytest.fixture
def make_project() -> Callable[..., Service]:
    """Factory for a service backed by a project."""

    def _make(name: str = "web", project_dir: str = "/src/web", **kwargs) -> Service:
        project = ProjectRunInfo(
            project_file=Path(project_dir) / f"{name}.csproj",
            target_framework=kwargs.pop("target_framework", "netcoreapp3.1"),
            **kwargs,
        )
        return Service(description=ServiceDescription(name=name, run_info=project))

    return _make


@pytest.fixture
def make_http_service() -> Callable[..., Service]:
    """Factory for a container service with bindings."""

    def _make(name: str, bindings: list[Binding] | None = None) -> Service:
        return Service(
            description=ServiceDescription(
                name=name,
                bindings=bindings or [],
                run_info=DockerRunInfo(image=f"{name}:latest"),
            )
        )

    return _make


@pytest.fixture
def make_ingress() -> Callable[..., Service]:
    """Factory for an ingress service."""

    def _make(rules: list[IngressRule], name: str = "ingress") -> Service:
        return Service(
            description=ServiceDescription(name=name, run_info=IngressRunInfo(rules=rules))
        )

    return _make


@pytest.fixture
def application() -> Application:
    return Application(name="test-app")
