"""Command line entry point for the host probe."""

import asyncio

import click
import structlog
from pydantic import ValidationError

from . import __version__
from .collector import Sampler
from .config import LOG_LEVELS, ProbeConfig
from .exceptions import ConfigurationError
from .logger import setup_logging
from .reporter import Reporter
from .service import ProbeService
from .sources import HostMetricsSource

logger = structlog.get_logger(__name__)

# Config field -> command line option, for error messages
OPTION_NAMES = {
    "node_name": "--node-name",
    "api_host": "--api-host",
    "token": "--token",
    "interval_seconds": "--seconds",
    "log_level": "--log-level",
    "log_format": "--log-format",
    "request_timeout": "--timeout",
}


def _format_validation_error(error: ValidationError) -> str:
    lines = []
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else ""
        lines.append(f"{OPTION_NAMES.get(field, field)}: {item['msg']}")
    return "\n".join(lines)


def build_config(**options) -> ProbeConfig:
    """Build the configuration from command line options.

    Options left unset fall back to ``PROBE_*`` environment variables and
    then to the defaults.
    """
    values = {key: value for key, value in options.items() if value is not None}
    try:
        return ProbeConfig(**values)
    except ValidationError as e:
        raise click.UsageError(_format_validation_error(e))


@click.command()
@click.version_option(version=__version__)
@click.option("--node-name", "-n", "node_name", help="Name this node reports under (required)")
@click.option("--api-host", "-a", "api_host", help="Base URL of the collection server (required)")
@click.option("--token", "-t", "token", help="Token sent in the x-api-token header (required)")
@click.option("--seconds", "-s", "interval_seconds", type=int, default=None,
              help="Seconds between two reports [default: 1]")
@click.option("--log-level", "log_level", type=click.Choice(LOG_LEVELS, case_sensitive=False),
              default=None, help="Log verbosity [default: info]")
@click.option("--log-format", "log_format", type=click.Choice(["console", "json"]),
              default=None, help="Log output format [default: console]")
@click.option("--timeout", "request_timeout", type=float, default=None,
              help="HTTP request timeout in seconds [default: 10]")
def cli(**options):
    """Host metrics probe - reports CPU, memory, network and load to a server."""
    config = build_config(**options)

    setup_logging("hostprobe", config.log_level, config.log_format)

    try:
        sampler = Sampler(config, HostMetricsSource())
    except ConfigurationError as e:
        raise click.UsageError(str(e))
    reporter = Reporter(config)
    service = ProbeService(config, sampler, reporter)

    try:
        asyncio.run(service.run_forever())
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
