"""
Metrics assembler - the scrape pipeline

fetch status -> [fetch leases, only if healthy] -> fill registry -> encode

A scrape is all-or-nothing: if either upstream call fails, no metrics are
returned and the caller gets an AssemblyError instead.
"""

from uls_exporter.kernel.errors import AssemblyError, UpstreamError
from uls_exporter.kernel.logging import LogOperation, get_logger
from uls_exporter.registry import (
    HEALTH_HELP,
    HEALTH_METRIC,
    LEASE_HELP,
    LEASE_LABELS,
    LEASE_METRIC,
    UPTIME_HELP,
    UPTIME_METRIC,
    MetricRegistry,
)
from uls_exporter.upstream.client import UlsClient
from uls_exporter.upstream.models import License, StatusReport

logger = get_logger(__name__)


def populate_status(registry: MetricRegistry, status: StatusReport) -> None:
    """Register and set the health and uptime gauges."""
    health = registry.gauge(HEALTH_METRIC, HEALTH_HELP)
    uptime = registry.gauge(UPTIME_METRIC, UPTIME_HELP)

    health.set(1 if status.is_healthy else 0)
    uptime.set(status.server_uptime_ms)


def populate_leases(registry: MetricRegistry, licenses: list[License]) -> None:
    """
    Register the lease gauge family and set one sample per license.

    Nothing is registered for an empty list, so the family is absent rather
    than declared without samples. Licenses sharing a full label tuple
    overwrite each other; the last one in upstream order wins.
    """
    if not licenses:
        return

    leased = registry.gauge(LEASE_METRIC, LEASE_HELP, LEASE_LABELS)
    for lease in licenses:
        leased.labels(*lease.label_values()).set(0 if lease.is_revoked else 1)


class MetricsAssembler:
    """Runs one scrape against the license server"""

    def __init__(self, client: UlsClient) -> None:
        self.client = client

    def assemble(self, status_url: str, lease_url: str) -> str:
        """
        Fetch upstream state and encode it as Prometheus text.

        Args:
            status_url: Full URL of the status endpoint
            lease_url: Full URL of the lease endpoint

        Returns:
            Encoded metrics text

        Raises:
            AssemblyError: Either upstream call failed
            RegistrationError: A metric could not be registered (programming error)
        """
        with LogOperation(logger, "scrape") as op:
            try:
                status = self.client.fetch_status(status_url)
            except UpstreamError as e:
                raise AssemblyError(e) from e

            registry = MetricRegistry()
            populate_status(registry, status)
            op.add_context(server_status=status.server_status)

            if status.is_healthy:
                try:
                    licenses = self.client.fetch_leases(lease_url)
                except UpstreamError as e:
                    raise AssemblyError(e) from e

                populate_leases(registry, licenses)
                op.add_context(lease_count=len(licenses))

            return registry.encode()
