"""
devtopo — CLI entrypoint.

Usage:
    devtopo --help
    devtopo transform
    devtopo transform --json --no-build
    devtopo extensions
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devtopo import __version__
from devtopo.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="devtopo")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to devtopo.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """devtopo — turn an application description into runnable containers."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("DEVTOPO_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("DEVTOPO_LOG_FILE"),
        log_file_level=os.environ.get("DEVTOPO_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--operation",
    type=click.Choice(["local-run", "deploy"]),
    default="local-run",
    show_default=True,
    help="Operation passed to extensions.",
)
@click.option("--no-build", is_flag=True, help="Skip the publish step (mock every build as successful).")
@click.pass_context
def transform(ctx: click.Context, as_json: bool, operation: str, no_build: bool) -> None:
    """Apply extensions and transform every service into a container."""
    from devtopo.adapters import MockProcessRunner, ShellProcessRunner
    from devtopo.core.config.loader import ConfigError, load_config
    from devtopo.core.engine import TransformProjectsIntoContainers
    from devtopo.core.extensions import ExtensionError, ExtensionRegistry, OperationKind

    try:
        loaded = load_config(ctx.obj.get("config_path"))
        ExtensionRegistry().apply(loaded.application, loaded.extensions, OperationKind(operation))
    except (ConfigError, ExtensionError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    application = loaded.application
    runner = MockProcessRunner(default_output="[no-build] publish skipped") if no_build else ShellProcessRunner()
    processor = TransformProjectsIntoContainers(runner, loaded.options)
    report = processor.start(application)
    processor.stop(application)

    if as_json:
        click.echo(json.dumps(
            {"report": report.to_dict(), "application": _dump_application(application)},
            indent=2,
        ))
        sys.exit(0 if report.all_ok else 1)

    quiet = ctx.obj.get("quiet", False)
    if not quiet:
        click.secho(f"\n📋 {application.name}", fg="cyan", bold=True)
        if application.options.logging_provider:
            click.echo(f"   logging → {application.options.logging_provider}")
        click.echo()

    for service in application.services.values():
        run_info = service.description.run_info
        deps = f"  (after {', '.join(sorted(service.dependencies))})" if service.dependencies else ""
        if run_info is None:
            click.secho(f"   ✗ {service.name}: nothing to run{deps}", fg="red")
        elif run_info.kind == "docker":
            click.echo(f"   ✓ {service.name}: {run_info.image} → {run_info.args or '(default command)'}{deps}")
        else:
            click.echo(f"   • {service.name}: {run_info.kind}{deps}")
        if ctx.obj.get("verbose") and service.name in report.failed:
            for line in service.logs.lines:
                click.echo(f"       {line}")

    if not quiet:
        status_color = {"ok": "green", "partial": "yellow", "failed": "red"}[report.status]
        click.echo()
        click.secho(f"   {report.status}", fg=status_color)

    if not report.all_ok:
        sys.exit(1)


@cli.command("extensions")
def list_extensions() -> None:
    """List the available extensions."""
    from devtopo.core.extensions import ExtensionRegistry

    for name in ExtensionRegistry().list_extensions():
        click.echo(name)


def _dump_application(application) -> dict:
    data = application.model_dump(mode="json")
    for service in data["services"].values():
        service["dependencies"] = sorted(service["dependencies"])
    return data


if __name__ == "__main__":
    cli()
