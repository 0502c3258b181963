"""Tenant model for multi-tenant isolation."""

from typing import Any, TYPE_CHECKING

from sqlalchemy import String, Boolean, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, new_id

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.customer import Customer

SYSTEM_TENANT_ID = "system-tenant"


class Tenant(Base, TimestampMixin):
    """
    Multi-tenant isolation boundary.

    A tenant is one customer organization (a laundry, a restaurant, a
    hotel). Every customer, order and user belongs to exactly one tenant
    and is never visible from another tenant's requests.

    Tenants are never hard-deleted in the normal flow: `is_active` is
    switched off instead, which blocks every login and request for the
    tenant's users.

    The distinguished tenant with id `system-tenant` holds SUPER_ADMIN
    users and is excluded from tenant administration.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_type: Mapped[str] = mapped_column(String(50), nullable=False, default="LAUNDRY_SERVICE")
    domain: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Validated through TenantSettings before being written
    settings: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Relationships
    users: Mapped[list["User"]] = relationship("User", back_populates="tenant")
    customers: Mapped[list["Customer"]] = relationship("Customer", back_populates="tenant")

    @property
    def is_system(self) -> bool:
        return self.id == SYSTEM_TENANT_ID

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name='{self.name}', active={self.is_active})>"
