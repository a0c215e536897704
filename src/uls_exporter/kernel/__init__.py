"""
Kernel - Shared infrastructure for the exporter

Error hierarchy and structured logging used by every other module.
"""

from uls_exporter.kernel.errors import (
    AssemblyError,
    ConfigError,
    DecodeError,
    ExporterError,
    RegistrationError,
    TransportError,
    UpstreamError,
    UpstreamStatusError,
)

__all__ = [
    "ExporterError",
    "ConfigError",
    "UpstreamError",
    "TransportError",
    "UpstreamStatusError",
    "DecodeError",
    "AssemblyError",
    "RegistrationError",
]
