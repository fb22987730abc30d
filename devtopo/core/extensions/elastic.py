"""
Elastic stack extension — inject an ELK sidecar for local log viewing.

Uses the "all-in-one" sebp/elk image for local development.
See https://elk-docker.readthedocs.io/
"""

from __future__ import annotations

from devtopo.core.extensions.base import (
    Extension,
    ExtensionConfiguration,
    ExtensionContext,
    OperationKind,
    inject_dependency_service,
)
from devtopo.core.models import (
    Binding,
    DockerRunInfo,
    DockerVolume,
    Service,
    ServiceDescription,
)

SERVICE_NAME = "elastic"
IMAGE = "sebp/elk"
DATA_DIRECTORY = "/var/lib/elasticsearch"

# For local development the port and hostname are fixed
LOCAL_LOGGING_PROVIDER = "elastic=http://localhost:9200"


def elastic_service(log_path: str | None = None) -> Service:
    """The ELK service: Kibana on 5601, Elasticsearch on 9200."""
    run_info = DockerRunInfo(image=IMAGE)
    if log_path:
        # https://elk-docker.readthedocs.io/#persisting-log-data
        run_info.volume_mappings.append(
            DockerVolume(source=log_path, name="elk-data", target=DATA_DIRECTORY)
        )

    return Service(
        description=ServiceDescription(
            name=SERVICE_NAME,
            bindings=[
                Binding(name="kibana", port=5601, container_port=5601, protocol="http"),
                Binding(name="elastic", port=9200, container_port=9200, protocol="http"),
            ],
            run_info=run_info,
        )
    )


class ElasticStackExtension(Extension):
    """Make an ELK stack a dependency of every service.

    Config keys:
        logPath (str): host directory to persist Elasticsearch data.
    """

    @property
    def name(self) -> str:
        return "elastic"

    def process(self, context: ExtensionContext, config: ExtensionConfiguration) -> None:
        application = context.application

        if SERVICE_NAME in application:
            context.output.debug("elastic service already configured. Skipping...")
        else:
            context.output.debug("Injecting elastic service...")
            inject_dependency_service(application, elastic_service(config.get_str("logPath")))

        if context.operation == OperationKind.LOCAL_RUN:
            if context.options.logging_provider is None:
                context.options.logging_provider = LOCAL_LOGGING_PROVIDER
        elif context.operation == OperationKind.DEPLOY:
            # TODO: configure the logging provider for deployed applications
            pass
