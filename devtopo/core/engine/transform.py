"""
Transformation driver — turn every project and ingress into a container.

Flow:
    application → schedule per-service transforms → run in parallel → report

Each transform writes only its own service, so no locking is needed.
One service failing never stops the others; ``start`` returns when every
transform has finished. Running builds cannot be cancelled.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable

from devtopo.adapters.base import ProcessRunner
from devtopo.core.config.options import TransformOptions
from devtopo.core.engine.build import transform_project_to_container
from devtopo.core.engine.ingress import transform_ingress_to_container
from devtopo.core.models import Application, IngressRunInfo, ProjectRunInfo, Service

logger = logging.getLogger(__name__)


@dataclass
class TransformReport:
    """Result of a transformation pass."""

    built: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    proxied: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.built) + len(self.failed) + len(self.proxied)

    @property
    def all_ok(self) -> bool:
        return not self.failed

    @property
    def status(self) -> str:
        if not self.failed:
            return "ok"
        if self.built or self.proxied:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "total": self.total,
            "built": sorted(self.built),
            "failed": sorted(self.failed),
            "proxied": sorted(self.proxied),
        }


class TransformProjectsIntoContainers:
    """Application processor: projects and ingresses → docker run-infos.

    Args:
        runner: Executes the external publish step.
        options: Images, paths and worker count.
    """

    def __init__(self, runner: ProcessRunner, options: TransformOptions | None = None):
        self._runner = runner
        self._options = options or TransformOptions()

    def start(self, application: Application) -> TransformReport:
        """Transform every project and ingress service, in parallel."""
        tasks: dict[str, tuple[str, Callable[[], object]]] = {}
        for service in list(application.services.values()):
            run_info = service.description.run_info
            if run_info is None:
                continue
            if run_info.kind == "project":
                tasks[service.name] = ("project", self._project_task(service, run_info))
            elif run_info.kind == "ingress":
                tasks[service.name] = ("ingress", self._ingress_task(application, service, run_info))
            elif run_info.kind == "docker":
                continue

        report = TransformReport()
        if not tasks:
            return report

        workers = self._options.max_workers or len(tasks)
        logger.debug("Transforming %d service(s) with %d worker(s)", len(tasks), workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="devtopo-transform") as pool:
            futures = {pool.submit(fn): name for name, (_, fn) in tasks.items()}
            for future in as_completed(futures):
                name = futures[future]
                kind = tasks[name][0]
                service = application.services[name]
                try:
                    future.result()
                except Exception:
                    logger.exception("Transforming service %s raised", name)
                    service.description.run_info = None

                if service.description.run_info is None:
                    report.failed.append(name)
                elif kind == "ingress":
                    report.proxied.append(name)
                else:
                    report.built.append(name)

        logger.info(
            "Transformed %d service(s): %d built, %d proxied, %d failed",
            report.total,
            len(report.built),
            len(report.proxied),
            len(report.failed),
        )
        return report

    def stop(self, application: Application) -> None:
        """Nothing to tear down; kept for the start/stop lifecycle."""

    # ── Helpers ─────────────────────────────────────────────────

    def _project_task(self, service: Service, project: ProjectRunInfo) -> Callable[[], object]:
        return lambda: transform_project_to_container(service, project, self._runner, self._options)

    def _ingress_task(
        self, application: Application, service: Service, ingress: IngressRunInfo
    ) -> Callable[[], object]:
        return lambda: transform_ingress_to_container(application, service, ingress, self._options)
