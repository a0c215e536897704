"""
Exporter configuration

ExporterConfig is validated once at startup. Anything wrong here is fatal
before the first scrape: a typo in ULS_BASE_URL should crash the process,
not turn every scrape into a 503.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from uls_exporter.kernel.errors import ConfigError

STATUS_PATH = "/v1/admin/status"
LEASE_PATH = "/v1/admin/lease"

DEFAULT_BIND_ADDR = "0.0.0.0:9837"
DEFAULT_TIMEOUT_SECONDS = 10.0


def parse_bind_addr(value: str) -> tuple[str, int]:
    """
    Split a ``host:port`` bind address.

    IPv6 hosts must be bracketed (``[::]:9837``).

    Raises:
        ValueError: If the address has no port or the port is out of range
    """
    host, sep, port_text = value.strip().rpartition(":")
    if not sep or not host:
        raise ValueError(f"bind address {value!r} must look like host:port")

    if host.startswith("["):
        if not host.endswith("]"):
            raise ValueError(f"bind address {value!r} has an unterminated IPv6 bracket")
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"IPv6 bind address {value!r} must be written as [host]:port")

    if not host:
        raise ValueError(f"bind address {value!r} has an empty host")

    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"bind address {value!r} has a non-numeric port") from None

    if not 1 <= port <= 65535:
        raise ValueError(f"bind address {value!r} port must be in 1..65535")

    return host, port


class ExporterConfig(BaseModel):
    """
    Runtime configuration for the exporter

    Owns the derived upstream endpoint URLs so request handlers never need
    process-wide state.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        description="Base URL of the Unity License Server, e.g. http://uls:8080",
    )
    bind_addr: str = Field(
        default=DEFAULT_BIND_ADDR,
        description="host:port the exporter listens on",
    )
    request_timeout: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0.0,
        description="Timeout in seconds for each request to the license server",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
    )
    json_logs: bool = Field(default=False)

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        scheme, sep, rest = value.partition("://")
        if not sep or scheme.lower() not in ("http", "https"):
            raise ValueError(f"base URL {value!r} must start with http:// or https://")
        if not rest or rest.startswith("/"):
            raise ValueError(f"base URL {value!r} has no host")
        return value

    @field_validator("bind_addr")
    @classmethod
    def _check_bind_addr(cls, value: str) -> str:
        parse_bind_addr(value)
        return value.strip()

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @property
    def status_url(self) -> str:
        """Full URL of the status endpoint"""
        return f"{self.base_url}{STATUS_PATH}"

    @property
    def lease_url(self) -> str:
        """Full URL of the lease endpoint"""
        return f"{self.base_url}{LEASE_PATH}"

    @property
    def host(self) -> str:
        return parse_bind_addr(self.bind_addr)[0]

    @property
    def port(self) -> int:
        return parse_bind_addr(self.bind_addr)[1]


def load_config(**values: object) -> ExporterConfig:
    """
    Build and validate an ExporterConfig.

    Args:
        **values: Field values; None means "use the default"

    Raises:
        ConfigError: With one line per invalid setting
    """
    provided = {k: v for k, v in values.items() if v is not None}
    if not provided.get("base_url"):
        raise ConfigError("ULS base URL is not set (use --base-url or ULS_BASE_URL)")

    try:
        return ExporterConfig(**provided)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigError("invalid configuration: " + "; ".join(problems)) from e
