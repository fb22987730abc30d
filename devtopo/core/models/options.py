"""
Host options — process-wide run settings.

Extensions are the only writers. The executor reads them once at startup.
"""

from __future__ import annotations

from pydantic import BaseModel


class HostOptions(BaseModel):
    """Run options shared by every service of an application."""

    logging_provider: str | None = None            # e.g. "elastic=http://localhost:9200"
    distributed_trace_provider: str | None = None
    metrics_provider: str | None = None
