"""
Per-scrape Prometheus registry for the ULS exporter.

Unlike a long-running service that instruments itself through the global
default registry, an exporter mirrors remote state. Every scrape gets its own
CollectorRegistry so a lease that disappeared upstream disappears from the
output too, and concurrent scrapes never see each other's samples.
"""

import math
from collections.abc import Sequence

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Gauge
from prometheus_client.utils import floatToGoString

from uls_exporter.kernel.errors import RegistrationError

# ============================================================================
# Server Metrics
# ============================================================================

HEALTH_METRIC = "uls_health"
HEALTH_HELP = "Health of the ULS"

UPTIME_METRIC = "uls_uptime_ms"
UPTIME_HELP = "Uptime of the ULS in ms"

# ============================================================================
# Lease Metrics
# ============================================================================

LEASE_METRIC = "uls_license_leased"
LEASE_HELP = "Currently leased ULS License"
LEASE_LABELS = ("lease_id", "lease_user", "lease_hostname", "lease_domain")

# Prometheus text exposition format 0.0.4
CONTENT_TYPE = CONTENT_TYPE_LATEST


class MetricRegistry:
    """In-memory collection of gauges for one scrape"""

    def __init__(self) -> None:
        self._registry = CollectorRegistry(auto_describe=True)

    def gauge(
        self,
        name: str,
        documentation: str,
        labelnames: Sequence[str] = (),
    ) -> Gauge:
        """
        Create a gauge and register it.

        Raises:
            RegistrationError: Name collides with a registered metric or the
                definition is invalid
        """
        try:
            return Gauge(name, documentation, labelnames, registry=self._registry)
        except ValueError as e:
            raise RegistrationError(name, str(e)) from e

    def encode(self) -> str:
        """
        Render all registered metrics in the Prometheus text format.

        Whole-number samples are written as integers. Go-style float
        formatting would render an uptime of 86400000 ms as 8.64e+07.
        """
        lines = []
        for family in self._registry.collect():
            lines.append(f"# HELP {family.name} {escape_help(family.documentation)}\n")
            lines.append(f"# TYPE {family.name} {family.type}\n")
            for sample in family.samples:
                lines.append(
                    f"{sample.name}{format_labels(sample.labels)} {format_value(sample.value)}\n"
                )
        return "".join(lines)


def escape_help(text: str) -> str:
    return text.replace("\\", r"\\").replace("\n", r"\n")


def escape_label_value(value: str) -> str:
    return value.replace("\\", r"\\").replace("\n", r"\n").replace('"', r'\"')


def format_labels(labels: dict[str, str]) -> str:
    if not labels:
        return ""
    pairs = ",".join(f'{name}="{escape_label_value(value)}"' for name, value in labels.items())
    return "{" + pairs + "}"


def format_value(value: float) -> str:
    """Render a sample value, keeping whole numbers free of exponents."""
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return floatToGoString(value)
