"""
Test Helper Functions - Fake license server and output parsing

FakeLicenseServer plugs into httpx.MockTransport so the exporter can be
exercised end-to-end without a network. Builders keep wire payloads short.

Fun fact: Test doubles that actually implement a protocol (rather than
stubbing single calls) were called "fakes" by Gerard Meszaros in 2007.
"""

from collections import Counter
from typing import Any

import httpx
from prometheus_client.parser import text_string_to_metric_families

from uls_exporter.config import LEASE_PATH, STATUS_PATH

BASE_URL = "http://uls.test:8080"
STATUS_URL = BASE_URL + STATUS_PATH
LEASE_URL = BASE_URL + LEASE_PATH


def status_payload(server_status: str = "Healthy", uptime_ms: int = 123456) -> dict[str, Any]:
    """Builder for a status endpoint body"""
    return {"serverStatus": server_status, "serverUpTimeMs": uptime_ms}


def lease_payload(
    lease_id: int,
    user: str = "alice",
    hostname: str = "host1",
    domain: str = "corp",
    revoked: bool = False,
) -> dict[str, Any]:
    """Builder for one lease endpoint entry"""
    return {
        "floatingLeaseId": lease_id,
        "clientEntitlementContext": {
            "EnvironmentDomain": domain,
            "EnvironmentHostname": hostname,
            "EnvironmentUser": user,
        },
        "isRevoked": revoked,
    }


class FakeLicenseServer:
    """
    In-process stand-in for the ULS admin API

    Set `status`/`leases` to control the JSON bodies. Put an exception or an
    httpx.Response in `overrides[path]` to make that endpoint misbehave.
    """

    def __init__(self) -> None:
        self.status: Any = status_payload()
        self.leases: Any = []
        self.overrides: dict[str, Exception | httpx.Response] = {}
        self.calls: Counter[str] = Counter()

    def fail_with(self, path: str, failure: Exception | httpx.Response) -> None:
        self.overrides[path] = failure

    def refuse_connections(self, path: str) -> None:
        """Make `path` behave like a closed port."""
        self.overrides[path] = httpx.ConnectError("Connection refused")

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls[path] += 1

        if path in self.overrides:
            failure = self.overrides[path]
            if isinstance(failure, Exception):
                raise failure
            return failure

        if path == STATUS_PATH:
            return httpx.Response(200, json=self.status)
        if path == LEASE_PATH:
            return httpx.Response(200, json=self.leases)
        return httpx.Response(404, text="not found")

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def parse_samples(text: str) -> dict[str, dict[tuple[tuple[str, str], ...], float]]:
    """
    Parse exposition text into {metric name: {sorted label items: value}}.

    Families with no samples are kept with an empty dict so tests can tell
    "absent" from "present but empty".
    """
    result: dict[str, dict[tuple[tuple[str, str], ...], float]] = {}
    for family in text_string_to_metric_families(text):
        samples = result.setdefault(family.name, {})
        for sample in family.samples:
            samples[tuple(sorted(sample.labels.items()))] = sample.value
    return result


def lease_labels(lease_id: int, user: str, hostname: str, domain: str) -> tuple[tuple[str, str], ...]:
    """Sorted label key as produced by parse_samples for uls_license_leased"""
    return tuple(
        sorted(
            {
                "lease_id": str(lease_id),
                "lease_user": user,
                "lease_hostname": hostname,
                "lease_domain": domain,
            }.items()
        )
    )
