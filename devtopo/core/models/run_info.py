"""
Run-info models — what a service is and how it gets launched.

A service carries exactly one run-info. It is a tagged union on ``kind``:

    project  → a source project that must be published first
    ingress  → declarative routing rules served by a reverse proxy
    docker   → a concrete container specification (the only kind the
               executor understands)

Transforms consume one kind and replace it with another; they never merge.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

_TFM_VERSION_RE = re.compile(r"^net(?:coreapp)?(\d+\.\d+)")


class DockerVolume(BaseModel):
    """A volume mapping: host path or named volume → container path."""

    source: str | None = None
    name: str | None = None
    target: str
    read_only: bool = False


class IngressRule(BaseModel):
    """Route requests matching host/path to a target service."""

    host: str | None = None
    path: str | None = None
    service: str


class ProjectRunInfo(BaseModel):
    """A buildable source project.

    Derived fields (framework version, assembly name, publish directory)
    are filled from the project file and framework when not given.
    """

    kind: Literal["project"] = "project"

    project_file: Path
    target_framework: str
    target_framework_version: str = ""
    assembly_name: str = ""
    publish_output_path: str = ""

    build_properties: dict[str, str] = Field(default_factory=dict)
    volume_mappings: list[DockerVolume] = Field(default_factory=list)
    args: str = ""
    private: bool = False

    @model_validator(mode="after")
    def _fill_derived(self) -> ProjectRunInfo:
        if not self.target_framework_version:
            self.target_framework_version = framework_version(self.target_framework)
        if not self.assembly_name:
            self.assembly_name = self.project_file.stem
        if not self.publish_output_path:
            self.publish_output_path = str(
                self.project_file.parent / "bin" / "Debug" / self.target_framework / "publish"
            )
        return self


class IngressRunInfo(BaseModel):
    """Declarative ingress: an ordered list of routing rules."""

    kind: Literal["ingress"] = "ingress"

    rules: list[IngressRule] = Field(default_factory=list)


class DockerRunInfo(BaseModel):
    """A runnable container specification."""

    kind: Literal["docker"] = "docker"

    image: str
    args: str = ""                  # launch command
    working_directory: str | None = None
    volume_mappings: list[DockerVolume] = Field(default_factory=list)
    private: bool = False


RunInfo = Annotated[
    Union[ProjectRunInfo, IngressRunInfo, DockerRunInfo],
    Field(discriminator="kind"),
]


def framework_version(target_framework: str) -> str:
    """Extract the runtime version from a framework moniker.

    ``netcoreapp3.1`` → ``3.1``, ``net5.0`` → ``5.0``. Unknown monikers
    are returned unchanged.
    """
    match = _TFM_VERSION_RE.match(target_framework)
    return match.group(1) if match else target_framework
