"""
Build orchestrator — publish a project and wrap the output in a container.

We transform the project into the equivalent of:

    docker run -w /app -v {publishDir}:/app {image} dotnet {assembly}.dll {args}

A failed publish leaves the service with no run-info at all, which the
executor reads as "nothing to run". There is no retry.
"""

from __future__ import annotations

import logging

from devtopo.adapters.base import ProcessRunner
from devtopo.core.config.options import TransformOptions
from devtopo.core.models import DockerRunInfo, DockerVolume, ProjectRunInfo, Service

logger = logging.getLogger(__name__)


def format_build_properties(properties: dict[str, str]) -> str:
    """Fold build properties into ``/p:Key=Value`` tokens."""
    args = ""
    for key, value in properties.items():
        args += f" /p:{key}={value}"
    return args.lstrip()


def publish_arguments(project_path: str, project: ProjectRunInfo) -> str:
    """Argument string for ``dotnet publish``."""
    build_args = format_build_properties(project.build_properties)
    return f'publish "{project_path}" --framework {project.target_framework} {build_args} /nologo'


def container_image(project: ProjectRunInfo, options: TransformOptions) -> str:
    """SDK image matching the project's runtime version."""
    return f"{options.image_repository}:{project.target_framework_version}"


def transform_project_to_container(
    service: Service,
    project: ProjectRunInfo,
    runner: ProcessRunner,
    options: TransformOptions | None = None,
) -> DockerRunInfo | None:
    """Publish ``project`` and replace the service's run-info.

    Returns:
        The new DockerRunInfo, or None when the publish failed.
    """
    options = options or TransformOptions()
    description = service.description

    service.status.project_file_path = str(project.project_file.resolve())
    service.status.target_framework = project.target_framework

    # Building can fail because of file locking (files open in an IDE)
    logger.info("Publishing project %s", service.status.project_file_path)

    args = publish_arguments(service.status.project_file_path, project)
    service.logs.write(f"{options.publish_command} {args}")

    result = runner.run(options.publish_command, args)
    service.logs.write(result.output)

    if not result.ok:
        logger.info(
            "Publishing %s failed with exit code %d:\n%s",
            service.status.project_file_path,
            result.exit_code,
            result.output,
        )
        description.run_info = None
        return None

    command = f"{options.launch_command} {project.assembly_name}.dll {project.args}".rstrip()
    docker = DockerRunInfo(
        image=container_image(project, options),
        args=command,
        working_directory=options.working_directory,
        private=project.private,
    )
    docker.volume_mappings.append(
        DockerVolume(source=project.publish_output_path, target=options.working_directory)
    )
    # Volumes declared on the project still apply inside the container
    docker.volume_mappings.extend(project.volume_mappings)

    description.run_info = docker
    logger.debug("Service %s → image %s", description.name, docker.image)
    return docker
