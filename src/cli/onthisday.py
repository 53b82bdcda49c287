"""CLI commands for the on-this-day feed pipeline."""

import json
import logging
import sys
from typing import Any

import click
import structlog
from pydantic import ValidationError

from src.acquisition import AcquisitionOrchestrator, build_orchestrator
from src.errors import AcquisitionError, ErrorKind, to_error_response
from src.health import HealthProbe
from src.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from src.settings import AppSettings, get_settings


logger = structlog.get_logger()

COMPONENT_CLI = "cli"

EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2
EXIT_RATE_LIMITED = 3

_EXIT_CODE_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: EXIT_INVALID_INPUT,
    ErrorKind.RATE_LIMITED: EXIT_RATE_LIMITED,
}


def _load_settings() -> AppSettings:
    """Load and validate settings, exiting on invalid configuration."""
    try:
        return get_settings()
    except ValidationError as e:
        click.echo("Configuration validation failed:", err=True)
        for error in e.errors():
            loc = ".".join(str(part) for part in error["loc"])
            click.echo(f"  - {loc}: {error['msg']}", err=True)
        sys.exit(EXIT_FAILURE)


def _setup_logging(
    settings: AppSettings,
    log_format: str | None,
    verbose: bool,
) -> None:
    level: int | str = logging.DEBUG if verbose else settings.log_level
    json_format = settings.json_logs if log_format is None else log_format == "json"
    configure_logging(level=level, json_format=json_format)


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"]),
    default=None,
    help="Log output format (default: console when APP_ENV=development, else json).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
@click.pass_context
def cli(ctx: click.Context, log_format: str | None, verbose: bool) -> None:
    """On-this-day feed acquisition CLI."""
    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = _load_settings()
    _setup_logging(ctx.obj["settings"], log_format, verbose)


@cli.command()
@click.option(
    "--month",
    required=True,
    type=int,
    help="Month number (1-12).",
)
@click.option(
    "--day",
    required=True,
    type=int,
    help="Day of month (1-31).",
)
@click.option(
    "--bypass-cache",
    is_flag=True,
    default=False,
    help="Skip the cache and always fetch from the API.",
)
@click.pass_context
def fetch(ctx: click.Context, month: int, day: int, bypass_cache: bool) -> None:
    """Fetch the sanitized feed for a date and print it as JSON."""
    settings: AppSettings = ctx.obj["settings"]
    orchestrator: AcquisitionOrchestrator = ctx.obj.get(
        "orchestrator"
    ) or build_orchestrator(settings)

    bind_request_context(f"cli-{month:02d}-{day:02d}")
    log = logger.bind(component=COMPONENT_CLI, command="fetch")

    try:
        feed = orchestrator.acquire_feed(month, day, bypass_cache=bypass_cache)
    except AcquisitionError as e:
        response = to_error_response(e)
        click.echo(
            json.dumps({"error": response["error"], "code": response["code"]}),
            err=True,
        )
        log.info("fetch_command_failed", error_kind=e.kind.value)
        sys.exit(_EXIT_CODE_BY_KIND.get(e.kind, EXIT_FAILURE))
    finally:
        clear_request_context()

    click.echo(json.dumps(feed.model_dump(mode="json"), indent=2, ensure_ascii=False))


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Probe the upstream API and print a health report."""
    settings: AppSettings = ctx.obj["settings"]
    probe: HealthProbe = ctx.obj.get("probe") or HealthProbe(
        base_url=settings.wikipedia_api_url,
        user_agent=settings.wikipedia_api_user_agent,
    )

    report = probe.check()
    payload: dict[str, Any] = report.model_dump(mode="json")
    payload["http_status"] = report.http_status
    click.echo(json.dumps(payload, indent=2))

    if report.status != "healthy":
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    cli()
