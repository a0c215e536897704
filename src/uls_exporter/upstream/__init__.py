"""
Upstream - Client and records for the Unity License Server admin API
"""

from uls_exporter.upstream.client import UlsClient
from uls_exporter.upstream.models import HEALTHY, EntitlementContext, License, StatusReport

__all__ = [
    "UlsClient",
    "StatusReport",
    "License",
    "EntitlementContext",
    "HEALTHY",
]
