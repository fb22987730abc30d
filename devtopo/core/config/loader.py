"""
Configuration loader — reads devtopo.yml into the topology model.

Shape of the file:

    name: shop
    extensions:
      - name: elastic
        logPath: ./.logs
    transform:
      maxWorkers: 4
    services:
      - name: web
        project: web/web.csproj
        framework: netcoreapp3.1
        bindings:
          - protocol: http
            containerPort: 80
            replicaPorts: [5000, 5001]
      - name: redis
        image: redis
    ingress:
      - name: gateway
        rules:
          - path: /api
            service: web

Keys are camelCase in YAML and snake_case in the models. Relative paths
are resolved against the directory holding the file.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from devtopo.core.config.options import TransformOptions
from devtopo.core.extensions.base import ExtensionConfiguration
from devtopo.core.models import (
    Application,
    Binding,
    DockerRunInfo,
    DockerVolume,
    EnvironmentVariable,
    IngressRule,
    IngressRunInfo,
    ProjectRunInfo,
    Service,
    ServiceDescription,
)

logger = logging.getLogger(__name__)

# Default config filename
APP_CONFIG_FILE = "devtopo.yml"

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


class ConfigError(Exception):
    """Raised when the application description is invalid or missing."""


@dataclass
class LoadedConfig:
    """Everything read from one devtopo.yml."""

    application: Application
    extensions: list[ExtensionConfiguration] = field(default_factory=list)
    options: TransformOptions = field(default_factory=TransformOptions)
    path: Path | None = None


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for devtopo.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to devtopo.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / APP_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> LoadedConfig:
    """Load and validate an application description.

    Args:
        path: Explicit path to devtopo.yml. If None, searches upward.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigError(f"No {APP_CONFIG_FILE} found. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading application config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    loaded = parse_config(data, base_dir=path.parent.resolve())
    loaded.path = path
    loaded.application.source = str(path)

    logger.info(
        "Loaded application '%s' with %d services",
        loaded.application.name,
        len(loaded.application.services),
    )
    return loaded


def parse_config(data: dict[str, Any], base_dir: Path | None = None) -> LoadedConfig:
    """Build the topology from an already-parsed YAML mapping.

    Raises:
        ConfigError: On schema errors or duplicate service names.
    """
    base_dir = base_dir or Path.cwd()
    application = Application(name=str(data.get("name") or base_dir.name))

    entries: list[tuple[str, dict]] = []
    for section in ("services", "ingress"):
        items = data.get(section) or []
        if not isinstance(items, list):
            raise ConfigError(f"'{section}' must be a list")
        for item in items:
            if not isinstance(item, dict) or not item.get("name"):
                raise ConfigError(f"Every entry in '{section}' needs a name")
            entries.append((section, item))

    for section, item in entries:
        try:
            if section == "ingress":
                service = _ingress_service(item)
            else:
                service = _service(item, base_dir)
        except (ValidationError, TypeError, KeyError) as e:
            raise ConfigError(f"Invalid service '{item['name']}': {e}") from e

        try:
            application.add_service(service)
        except ValueError as e:
            raise ConfigError(str(e)) from e

    try:
        extensions = [
            _extension(item) for item in (data.get("extensions") or [])
        ]
        options = TransformOptions.model_validate(_snake_keys(data.get("transform") or {}))
    except (ValidationError, TypeError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    return LoadedConfig(application=application, extensions=extensions, options=options)


# ── Helpers ─────────────────────────────────────────────────────


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _snake_keys(data: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"expected a mapping, got {type(data).__name__}")
    return {_snake(k): v for k, v in data.items()}


def _resolve(base_dir: Path, value: str) -> str:
    candidate = Path(value).expanduser()
    return str(candidate if candidate.is_absolute() else (base_dir / candidate).resolve())


def _extension(item: Any) -> ExtensionConfiguration:
    if not isinstance(item, dict) or not item.get("name"):
        raise TypeError("every extension needs a name")
    data = {k: v for k, v in item.items() if k != "name"}
    return ExtensionConfiguration(name=str(item["name"]), data=data)


def _env(item: dict) -> list[EnvironmentVariable]:
    raw = item.get("env") or item.get("configuration") or []
    if isinstance(raw, dict):
        return [EnvironmentVariable(name=k, value=None if v is None else str(v)) for k, v in raw.items()]
    return [
        EnvironmentVariable(name=e["name"], value=None if e.get("value") is None else str(e["value"]))
        for e in raw
    ]


def _volumes(item: dict, base_dir: Path) -> list[DockerVolume]:
    volumes = []
    for raw in item.get("volumes") or []:
        volume = DockerVolume.model_validate(_snake_keys(raw))
        if volume.source:
            volume.source = _resolve(base_dir, volume.source)
        volumes.append(volume)
    return volumes


def _build_properties(raw: Any) -> dict[str, str]:
    if isinstance(raw, dict):
        return {str(k): str(v) for k, v in raw.items()}
    return {str(p["name"]): str(p["value"]) for p in raw or []}


def _description(item: dict) -> ServiceDescription:
    return ServiceDescription(
        name=str(item["name"]),
        replicas=item.get("replicas", 1),
        bindings=[Binding.model_validate(_snake_keys(b)) for b in item.get("bindings") or []],
        configuration=_env(item),
    )


def _service(item: dict, base_dir: Path) -> Service:
    description = _description(item)

    if item.get("project"):
        description.run_info = _project(item, base_dir)
    elif item.get("image"):
        description.run_info = DockerRunInfo(
            image=item["image"],
            args=item.get("args") or "",
            working_directory=item.get("workingDirectory"),
            volume_mappings=_volumes(item, base_dir),
            private=bool(item.get("private", False)),
        )
    elif item.get("rules") is not None:
        description.run_info = _ingress(item)

    return Service(description=description, dependencies=set(item.get("dependsOn") or []))


def _ingress_service(item: dict) -> Service:
    description = _description(item)
    description.run_info = _ingress(item)
    return Service(description=description)


def _ingress(item: dict) -> IngressRunInfo:
    return IngressRunInfo(rules=[IngressRule.model_validate(r) for r in item.get("rules") or []])


def _project(item: dict, base_dir: Path) -> ProjectRunInfo:
    project_file = Path(_resolve(base_dir, item["project"]))
    metadata = read_project_metadata(project_file)

    framework = item.get("framework") or metadata.get("target_framework")
    if not framework:
        raise ConfigError(
            f"Service '{item['name']}': no framework given and none found in {project_file}"
        )

    return ProjectRunInfo(
        project_file=project_file,
        target_framework=framework,
        assembly_name=metadata.get("assembly_name", ""),
        build_properties=_build_properties(item.get("buildProperties")),
        volume_mappings=_volumes(item, base_dir),
        args=item.get("args") or "",
        private=bool(item.get("private", False)),
    )


def read_project_metadata(project_file: Path) -> dict[str, str]:
    """Read TargetFramework(s) and AssemblyName from an MSBuild project file.

    Missing or unreadable files yield an empty mapping.
    """
    if not project_file.is_file():
        return {}

    try:
        root = ET.parse(project_file).getroot()
    except (ET.ParseError, OSError) as e:
        logger.debug("Cannot read project metadata from %s: %s", project_file, e)
        return {}

    metadata: dict[str, str] = {}
    for element in root.iter():
        tag = element.tag.rsplit("}", 1)[-1]
        text = (element.text or "").strip()
        if not text:
            continue
        if tag == "TargetFramework" and "target_framework" not in metadata:
            metadata["target_framework"] = text
        elif tag == "TargetFrameworks" and "target_framework" not in metadata:
            metadata["target_framework"] = text.split(";")[0].strip()
        elif tag == "AssemblyName" and "assembly_name" not in metadata:
            metadata["assembly_name"] = text
    return metadata
