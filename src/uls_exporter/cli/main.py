"""
ULS Exporter CLI

Command-line entry point for the Unity License Server Prometheus exporter.
Every option can also be supplied through an environment variable.

Usage:
    ULS_BASE_URL=http://uls:8080 uls-exporter serve
    uls-exporter serve --base-url http://uls:8080 --bind-addr 127.0.0.1:9837
    uls-exporter check --base-url http://uls:8080
"""

from typing import Optional

import typer
from typing_extensions import Annotated

from uls_exporter.assembler import MetricsAssembler
from uls_exporter.config import DEFAULT_BIND_ADDR, ExporterConfig, load_config
from uls_exporter.kernel.errors import AssemblyError, ConfigError
from uls_exporter.kernel.logging import configure_logging, get_logger
from uls_exporter.server import render_error, run_server
from uls_exporter.upstream.client import UlsClient

logger = get_logger(__name__)

app = typer.Typer(
    name="uls-exporter",
    help="Prometheus exporter for the Unity License Server",
    add_completion=False,
)

BaseUrlOption = Annotated[
    Optional[str],
    typer.Option(
        "--base-url",
        envvar="ULS_BASE_URL",
        help="Base URL of the license server (required)",
    ),
]
BindAddrOption = Annotated[
    str,
    typer.Option(
        "--bind-addr",
        envvar="ULS_EXPORTER_BINDADDR",
        help="host:port to listen on",
    ),
]
TimeoutOption = Annotated[
    Optional[float],
    typer.Option(
        "--timeout",
        envvar="ULS_EXPORTER_TIMEOUT",
        help="Timeout in seconds for each license server request (default: 10)",
    ),
]
LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        envvar="ULS_EXPORTER_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
]
JsonLogsOption = Annotated[
    bool,
    typer.Option(
        "--json-logs",
        envvar="ULS_EXPORTER_JSON_LOGS",
        help="Output logs in JSON format",
    ),
]


def build_config(
    base_url: Optional[str],
    bind_addr: str,
    timeout: Optional[float],
    log_level: str,
    json_logs: bool,
) -> ExporterConfig:
    """Validate options and set up logging, exiting with status 1 on bad config."""
    try:
        config = load_config(
            base_url=base_url,
            bind_addr=bind_addr,
            request_timeout=timeout,
            log_level=log_level,
            json_logs=json_logs,
        )
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    configure_logging(json_output=config.json_logs, log_level=config.log_level)
    return config


@app.command()
def serve(
    base_url: BaseUrlOption = None,
    bind_addr: BindAddrOption = DEFAULT_BIND_ADDR,
    timeout: TimeoutOption = None,
    log_level: LogLevelOption = "INFO",
    json_logs: JsonLogsOption = False,
) -> None:
    """Serve license server metrics on /metrics"""
    config = build_config(base_url, bind_addr, timeout, log_level, json_logs)
    run_server(config)


@app.command()
def check(
    base_url: BaseUrlOption = None,
    timeout: TimeoutOption = None,
    log_level: LogLevelOption = "WARNING",
    json_logs: JsonLogsOption = False,
) -> None:
    """Scrape the license server once and print the metrics"""
    config = build_config(base_url, DEFAULT_BIND_ADDR, timeout, log_level, json_logs)

    with UlsClient(timeout=config.request_timeout) as client:
        try:
            body = MetricsAssembler(client).assemble(config.status_url, config.lease_url)
        except AssemblyError as e:
            typer.echo(render_error(e), err=True)
            raise typer.Exit(1)

    typer.echo(body, nl=False)


if __name__ == "__main__":
    app()
