"""
ULS Exporter - Prometheus exporter for the Unity License Server

Polls the license server's admin API on every scrape and republishes server
health, uptime and per-lease state as Prometheus gauges.

Fun fact: Prometheus chose a pull model because a scrape that fails is itself
a signal. This exporter keeps that property by answering 503 whenever the
license server cannot be reached.
"""

from uls_exporter.assembler import MetricsAssembler
from uls_exporter.config import ExporterConfig, load_config
from uls_exporter.server import create_app
from uls_exporter.upstream.client import UlsClient

__version__ = "0.1.0"
__all__ = ["ExporterConfig", "MetricsAssembler", "UlsClient", "create_app", "load_config", "__version__"]
