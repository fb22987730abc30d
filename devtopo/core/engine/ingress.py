"""
Ingress synthesizer — turn routing rules into a reverse-proxy container.

Each resolved rule becomes five environment variables read by the proxy:

    Rules__0__Host      = null
    Rules__0__Path      = /api
    Rules__0__Service   = frontend
    Rules__0__Port      = 10067
    Rules__0__Protocol  = http

Rules whose target is unknown, or has no http/https binding, are skipped
and do not consume an index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from devtopo.core.config.options import TransformOptions
from devtopo.core.models import (
    Application,
    Binding,
    DockerRunInfo,
    DockerVolume,
    IngressRule,
    IngressRunInfo,
    Service,
)

logger = logging.getLogger(__name__)

# HTTP before HTTPS (the proxy does not manage certificates)
PROTOCOL_PREFERENCE = ("http", "https")


@dataclass
class IngressRoute:
    """A rule resolved against the topology."""

    index: int
    rule: IngressRule
    binding: Binding
    replica_urls: list[str] = field(default_factory=list)

    @property
    def port(self) -> int | None:
        return self.binding.effective_port

    @property
    def protocol(self) -> str:
        return self.binding.protocol or ""

    @property
    def prefix(self) -> str:
        return f"Rules__{self.index}__"

    def environment(self) -> list[tuple[str, str | None]]:
        """The (name, value) pairs handed to the proxy for this route."""
        port = self.port
        return [
            (f"{self.prefix}Host", self.rule.host),
            (f"{self.prefix}Path", self.rule.path),
            (f"{self.prefix}Service", self.rule.service),
            (f"{self.prefix}Port", str(port) if port is not None else None),
            (f"{self.prefix}Protocol", self.protocol),
        ]


def select_binding(bindings: list[Binding]) -> Binding | None:
    """First http binding, else first https binding, else None."""
    for protocol in PROTOCOL_PREFERENCE:
        for binding in bindings:
            if binding.protocol == protocol:
                return binding
    return None


def replica_urls(binding: Binding) -> list[str]:
    """Base URL of every replica behind ``binding``."""
    return [f"{binding.protocol}://localhost:{port}" for port in binding.replica_ports]


def proxy_run_info(options: TransformOptions) -> DockerRunInfo:
    """The fixed proxy container with its binaries mounted read-only."""
    run_info = DockerRunInfo(
        image=options.proxy_image,
        args=options.proxy_command,
        working_directory=options.working_directory,
    )
    run_info.volume_mappings.append(
        DockerVolume(
            source=options.resolved_proxy_location(),
            target=options.working_directory,
            read_only=True,
        )
    )
    return run_info


def resolve_routes(application: Application, ingress: IngressRunInfo) -> list[IngressRoute]:
    """Resolve rules in declaration order, skipping the unresolvable ones."""
    routes: list[IngressRoute] = []
    for rule in ingress.rules:
        target = application.get(rule.service)
        if target is None:
            logger.debug("Ingress rule targets unknown service %s, skipping", rule.service)
            continue

        binding = select_binding(target.description.bindings)
        if binding is None:
            logger.info("Service %s does not have any HTTP or HTTPS bindings", target.name)
            continue

        routes.append(
            IngressRoute(
                index=len(routes),
                rule=rule,
                binding=binding,
                replica_urls=replica_urls(binding),
            )
        )
    return routes


def transform_ingress_to_container(
    application: Application,
    service: Service,
    ingress: IngressRunInfo,
    options: TransformOptions | None = None,
) -> list[IngressRoute]:
    """Replace an ingress service's run-info with a proxy container.

    The rule variables are appended to the service's existing
    configuration. Replica URLs are kept on the returned routes only;
    the proxy currently receives a single port per rule.

    Returns:
        The resolved routes, in index order.
    """
    options = options or TransformOptions()
    description = service.description

    run_info = proxy_run_info(options)
    routes = resolve_routes(application, ingress)

    for route in routes:
        for name, value in route.environment():
            description.add_env(name, value)

    description.run_info = run_info
    logger.debug("Ingress %s → proxy with %d rule(s)", description.name, len(routes))
    return routes
