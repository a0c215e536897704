"""
License server wire models

Records returned by the ULS admin API. Field names on the wire are camelCase,
except the entitlement context which uses PascalCase. Validation is strict:
a string where the API promises an integer is a decode failure, not a guess.
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

HEALTHY = "Healthy"


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)


class StatusReport(_WireModel):
    """
    Health snapshot of the license server

    server_status is opaque: only an exact match against "Healthy" means
    the server is up.
    """

    server_status: str = Field(alias="serverStatus")
    server_uptime_ms: int = Field(alias="serverUpTimeMs", ge=0)

    @property
    def is_healthy(self) -> bool:
        return self.server_status == HEALTHY


class EntitlementContext(_WireModel):
    """Identity of the client holding a lease"""

    domain: str = Field(alias="EnvironmentDomain")
    hostname: str = Field(alias="EnvironmentHostname")
    user: str = Field(alias="EnvironmentUser")


class License(_WireModel):
    """One floating license lease"""

    floating_lease_id: int = Field(alias="floatingLeaseId")
    entitlement_context: EntitlementContext = Field(alias="clientEntitlementContext")
    is_revoked: bool = Field(alias="isRevoked")

    def label_values(self) -> tuple[str, str, str, str]:
        """Label tuple in (lease_id, lease_user, lease_hostname, lease_domain) order"""
        ctx = self.entitlement_context
        return (str(self.floating_lease_id), ctx.user, ctx.hostname, ctx.domain)


STATUS_ADAPTER = TypeAdapter(StatusReport)
LEASES_ADAPTER = TypeAdapter(list[License])
