"""Repository for Tenant model operations."""

from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.customer import Customer
from app.models.order import Order
from app.models.role import UserRole
from app.models.tenant import Tenant, SYSTEM_TENANT_ID
from app.models.user import User


class TenantRepository:
    """Repository for Tenant model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, tenant_id: str) -> Tenant | None:
        """
        Get tenant by ID.

        Args:
            tenant_id: Tenant ID

        Returns:
            Tenant object or None if not found
        """
        return self.db.query(Tenant).filter(Tenant.id == tenant_id).first()

    def get_by_domain(self, domain: str) -> Tenant | None:
        return self.db.query(Tenant).filter(Tenant.domain == domain).first()

    def search(
        self,
        search: str | None = None,
        is_active: bool | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Tenant], int]:
        """
        List customer tenants, newest first. The system tenant is never included.

        Args:
            search: Case-insensitive substring of the tenant name
            is_active: Filter by active flag (None for all)
            limit: Page size
            offset: Number of tenants to skip

        Returns:
            Tuple of (tenants page, total matching count)
        """
        query = self.db.query(Tenant).filter(Tenant.id != SYSTEM_TENANT_ID)

        if search:
            query = query.filter(Tenant.name.ilike(f"%{search}%"))
        if is_active is not None:
            query = query.filter(Tenant.is_active == is_active)

        total = query.count()
        tenants = query.order_by(Tenant.created_at.desc()).offset(offset).limit(limit).all()
        return tenants, total

    def get_owner(self, tenant_id: str) -> User | None:
        """First ADMIN user of a tenant"""
        return (
            self.db.query(User)
            .filter(User.tenant_id == tenant_id, User.role == UserRole.ADMIN)
            .order_by(User.created_at)
            .first()
        )

    def get_counts(self, tenant_id: str) -> dict[str, int]:
        """Number of users, customers and orders owned by a tenant"""
        return {
            "users_count": self._count(User, tenant_id),
            "customers_count": self._count(Customer, tenant_id),
            "orders_count": self._count(Order, tenant_id),
        }

    def _count(self, model, tenant_id: str) -> int:
        return self.db.query(func.count(model.id)).filter(model.tenant_id == tenant_id).scalar()

    def create_no_commit(self, tenant: Tenant) -> Tenant:
        """
        Add tenant without committing.
        Caller responsible for commit. Enables tenant + first user onboarding.
        """
        self.db.add(tenant)
        self.db.flush()
        return tenant

    def update(self, tenant: Tenant) -> Tenant:
        """
        Update an existing tenant.

        Args:
            tenant: Tenant object with updated fields

        Returns:
            Updated Tenant object
        """
        self.db.commit()
        self.db.refresh(tenant)
        return tenant
