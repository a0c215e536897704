"""
HTTP client for the Unity License Server admin API.

One UlsClient (and its connection pool) is shared by all scrapes. Each fetch
is a single GET with an explicit timeout; failures are raised immediately as
UpstreamError subclasses and never retried.
"""

from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from uls_exporter.config import DEFAULT_TIMEOUT_SECONDS
from uls_exporter.kernel.errors import DecodeError, TransportError, UpstreamStatusError
from uls_exporter.kernel.logging import get_logger
from uls_exporter.upstream.models import LEASES_ADAPTER, STATUS_ADAPTER, License, StatusReport

logger = get_logger(__name__)


class UlsClient:
    """
    Thin wrapper around httpx.Client for the two admin endpoints

    httpx.Client is thread-safe, so concurrent scrapes share one instance.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Args:
            timeout: Connect/read/write/pool timeout in seconds for every request
            transport: Optional transport override (tests pass httpx.MockTransport)
        """
        self.timeout = timeout
        self._http = httpx.Client(
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def fetch_status(self, url: str) -> StatusReport:
        """
        GET the status endpoint.

        Raises:
            TransportError: Request could not be completed
            UpstreamStatusError: Non-2xx response
            DecodeError: Body is not a valid status object
        """
        return self._get_json(url, STATUS_ADAPTER)

    def fetch_leases(self, url: str) -> list[License]:
        """
        GET the lease endpoint.

        Raises:
            TransportError: Request could not be completed
            UpstreamStatusError: Non-2xx response
            DecodeError: Body is not a JSON array of leases
        """
        return self._get_json(url, LEASES_ADAPTER)

    def _get_json(self, url: str, adapter: TypeAdapter[Any]) -> Any:
        try:
            response = self._http.get(url)
        except httpx.TransportError as e:
            raise TransportError(url, str(e) or type(e).__name__) from e

        logger.debug(
            "Upstream responded",
            url=url,
            status_code=response.status_code,
            content_length=len(response.content),
        )

        if not response.is_success:
            raise UpstreamStatusError(url, response.status_code)

        try:
            return adapter.validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(url, str(e)) from e

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._http.close()

    def __enter__(self) -> "UlsClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
