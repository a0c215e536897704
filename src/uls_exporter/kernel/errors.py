"""
Custom exceptions for the ULS exporter

Well-defined error hierarchy lets the HTTP layer tell an unreachable license
server apart from a malformed answer or a programming mistake.

Fun fact: HTTP 503 was defined in 1996 (RFC 1945 era drafts) for "temporarily
overloaded" servers. Exporters reuse it to tell Prometheus "the thing behind me
is down, not me".
"""


class ExporterError(Exception):
    """Base exception for all ULS exporter errors"""

    pass


class ConfigError(ExporterError):
    """Raised when startup configuration is missing or invalid"""

    pass


# Upstream Errors


class UpstreamError(ExporterError):
    """Base class for failures talking to the license server"""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


class TransportError(UpstreamError):
    """
    Raised when the request to the license server could not be completed

    Covers refused connections, DNS failures and timeouts.
    """

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(url, f"request to {url} failed: {reason}")


class UpstreamStatusError(UpstreamError):
    """Raised when the license server answers with a non-2xx status"""

    def __init__(self, url: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(url, f"request to {url} returned HTTP {status_code}")


class DecodeError(UpstreamError):
    """Raised when a response body does not match the expected JSON shape"""

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(url, f"could not decode response from {url}: {reason}")


# Scrape Errors


class AssemblyError(ExporterError):
    """
    Raised when a scrape cannot produce metrics

    Wraps the upstream failure that aborted the scrape. The message keeps the
    upstream description so it can be shown to the scraper verbatim.
    """

    def __init__(self, cause: UpstreamError) -> None:
        self.cause = cause
        super().__init__(str(cause))


class RegistrationError(ExporterError):
    """
    Raised when a metric cannot be registered

    Metric names are static, so this only happens on a programming error
    (duplicate name or invalid definition).
    """

    def __init__(self, metric_name: str, reason: str) -> None:
        self.metric_name = metric_name
        super().__init__(f"could not register metric {metric_name}: {reason}")
