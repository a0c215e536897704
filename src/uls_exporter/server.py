"""
HTTP server for the ULS exporter.

Serves a liveness banner on / and the scraped license server metrics on
/metrics. Configuration and the upstream client live on the Flask app
instance, so several apps (e.g. in tests) can coexist in one process.
"""

from flask import Flask, Response, current_app, g, request

from uls_exporter.assembler import MetricsAssembler
from uls_exporter.config import ExporterConfig
from uls_exporter.kernel.errors import AssemblyError, RegistrationError
from uls_exporter.kernel.logging import generate_correlation_id, get_logger, set_correlation_id
from uls_exporter.registry import CONTENT_TYPE
from uls_exporter.upstream.client import UlsClient

logger = get_logger(__name__)

BANNER = "Unity License Server Exporter \n Metrics exported on /metrics"
ERROR_HEADER = "# An error occurred while trying to contact the license server: \n# "
REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

EXTENSION_KEY = "uls_exporter"


def render_error(error: AssemblyError) -> str:
    """
    Render a scrape failure as comment-only Prometheus text.

    Every line of the error description is prefixed with "# " so a scraper
    parsing the 503 body still sees valid exposition text.
    """
    return ERROR_HEADER + "\n# ".join(str(error).split("\n"))


def index() -> Response:
    """Liveness banner - never touches the license server."""
    return Response(BANNER, status=200, mimetype="text/plain")


def metrics() -> Response:
    """
    Scrape the license server and return its metrics.

    Returns:
        200 with Prometheus text, or 503 with a commented error description
    """
    state = current_app.extensions[EXTENSION_KEY]
    config: ExporterConfig = state["config"]
    assembler: MetricsAssembler = state["assembler"]

    try:
        body = assembler.assemble(config.status_url, config.lease_url)
    except AssemblyError as e:
        return Response(render_error(e), status=503, mimetype="text/plain")
    except RegistrationError as e:
        logger.error("Metric registration failed", metric=e.metric_name, exc_info=True)
        raise

    return Response(body, status=200, content_type=CONTENT_TYPE)


def assign_correlation_id() -> None:
    """
    Give each request its own correlation ID, honouring X-Request-ID.

    Inbound IDs are truncated to MAX_REQUEST_ID_LENGTH before they reach the
    logs or the response header.
    """
    inbound = request.headers.get(REQUEST_ID_HEADER, "")[:MAX_REQUEST_ID_LENGTH]
    cid = inbound or generate_correlation_id()
    set_correlation_id(cid)
    g.correlation_id = cid


def echo_correlation_id(response: Response) -> Response:
    cid = g.get("correlation_id")
    if cid:
        response.headers[REQUEST_ID_HEADER] = cid
    return response


def create_app(config: ExporterConfig, client: UlsClient | None = None) -> Flask:
    """
    Build the exporter's Flask app.

    Args:
        config: Validated exporter configuration
        client: Upstream client to share across scrapes; one is created from
            config.request_timeout when omitted

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    if client is None:
        client = UlsClient(timeout=config.request_timeout)

    app.extensions[EXTENSION_KEY] = {
        "config": config,
        "client": client,
        "assembler": MetricsAssembler(client),
    }

    app.before_request(assign_correlation_id)
    app.after_request(echo_correlation_id)
    app.add_url_rule("/", "index", index, methods=["GET"])
    app.add_url_rule("/metrics", "metrics", metrics, methods=["GET"])

    return app


def run_server(config: ExporterConfig, client: UlsClient | None = None) -> None:
    """
    Run the exporter with werkzeug's threaded server (one thread per request).

    Args:
        config: Validated exporter configuration
        client: Optional upstream client override
    """
    app = create_app(config, client)
    logger.info("ULS status url configured", url=config.status_url)
    logger.info("ULS lease url configured", url=config.lease_url)
    logger.info("Starting exporter", host=config.host, port=config.port)

    try:
        app.run(host=config.host, port=config.port, threaded=True)
    finally:
        app.extensions[EXTENSION_KEY]["client"].close()
