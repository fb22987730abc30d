"""
Transform options — knobs for the transformation pipeline.

Defaults reproduce the stock behaviour: SDK images from mcr.microsoft.com,
published output mounted at /app, the bundled HTTP proxy for ingress.
Overridable from the ``transform:`` section of devtopo.yml.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


def default_proxy_location() -> str:
    """Host directory holding the proxy binaries: the package install location."""
    return str(Path(__file__).resolve().parents[2])


class TransformOptions(BaseModel):
    """Settings read by the build and ingress transforms."""

    # ── Build ────────────────────────────────────────────────────
    publish_command: str = "dotnet"     # host-side publish step
    launch_command: str = "dotnet"      # runs the published assembly in the container
    image_repository: str = "mcr.microsoft.com/dotnet/core/sdk"
    working_directory: str = "/app"

    # ── Ingress proxy ────────────────────────────────────────────
    proxy_image: str = "mcr.microsoft.com/dotnet/core/sdk:3.1"
    proxy_command: str = "dotnet Microsoft.Tye.HttpProxy.dll"
    proxy_location: str | None = None   # None → default_proxy_location()

    # ── Scheduling ───────────────────────────────────────────────
    max_workers: int | None = None      # None → one worker per transform

    def resolved_proxy_location(self) -> str:
        return self.proxy_location or default_proxy_location()
