"""Tenant context for request authorization."""

from dataclasses import dataclass
from app.models.user import User
from app.models.role import UserRole


@dataclass(frozen=True)
class TenantContext:
    """
    Request-scoped identity passed explicitly into services.

    Built once per request after authentication. The tenant is always the
    authenticated user's tenant, so every tenant-scoped query filters on
    `tenant_id` from here.

    Attributes:
        tenant_id: Effective tenant of the request
        user: The authenticated User object
    """

    tenant_id: str
    user: User

    @property
    def role(self) -> UserRole:
        return self.user.role

    def tenant_filter(self) -> dict[str, str]:
        """Filter clause applied to every tenant-scoped query."""
        return {"tenant_id": self.tenant_id}

    def __repr__(self) -> str:
        return f"<TenantContext(user_id={self.user.id}, tenant_id={self.tenant_id}, role={self.role.value})>"
