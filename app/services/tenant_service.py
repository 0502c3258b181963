import logging

from sqlalchemy.orm import Session
from app.models.tenant import Tenant, SYSTEM_TENANT_ID
from app.models.user import User
from app.models.tenant_context import TenantContext
from app.models.role import UserRole
from app.core.security import hash_password
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository
from app.schemas.tenant_schemas import (
    ContactInfo,
    TenantCreate,
    TenantSettings,
    TenantUpdate,
)
from app.core.exceptions import (
    ConflictException,
    NotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

STATUS_FILTERS = {"ALL": None, "ACTIVE": True, "INACTIVE": False}


class TenantService:
    """Service layer for tenant management business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.tenant_repo = TenantRepository(db)
        self.user_repo = UserRepository(db)

    def get_current_tenant(self, context: TenantContext) -> Tenant:
        """
        Get current tenant details.

        Args:
            context: Tenant context with authenticated user

        Returns:
            Current tenant object
        """
        return context.user.tenant

    def update_tenant(self, data: TenantUpdate, context: TenantContext) -> Tenant:
        """
        Update the current tenant's profile.

        Role checks happen at the route; this only applies the changes.

        Raises:
            ConflictException: Domain already used by another tenant
        """
        tenant = context.user.tenant

        if data.name is not None:
            tenant.name = data.name
        if data.domain is not None and data.domain != tenant.domain:
            existing = self.tenant_repo.get_by_domain(data.domain)
            if existing and existing.id != tenant.id:
                raise ConflictException("This domain is already in use")
            tenant.domain = data.domain
        if data.settings is not None:
            tenant.settings = data.settings.model_dump(by_alias=True, exclude_none=True, mode="json")

        return self.tenant_repo.update(tenant)

    def list_tenants(
        self, search: str | None = None, status: str = "ALL", limit: int = 20, offset: int = 0
    ) -> dict:
        """
        List customer tenants for system administration.

        Args:
            search: Substring of the tenant name
            status: ALL, ACTIVE or INACTIVE

        Returns:
            Page of tenants, each with its first ADMIN user and record counts
        """
        tenants, total = self.tenant_repo.search(search, STATUS_FILTERS[status], limit, offset)

        result = []
        for tenant in tenants:
            result.append(
                {
                    "id": tenant.id,
                    "name": tenant.name,
                    "business_type": tenant.business_type,
                    "domain": tenant.domain,
                    "is_active": tenant.is_active,
                    "settings": tenant.settings,
                    "created_at": tenant.created_at,
                    "updated_at": tenant.updated_at,
                    "status": "ACTIVE" if tenant.is_active else "INACTIVE",
                    "owner": self.tenant_repo.get_owner(tenant.id),
                    "stats": self.tenant_repo.get_counts(tenant.id),
                }
            )
        return {"tenants": result, "total": total, "limit": limit, "offset": offset}

    def create_tenant(self, data: TenantCreate) -> dict:
        """
        Create a tenant and its ADMIN user in one commit.

        Raises:
            ConflictException: Email or domain already in use
        """
        if self.user_repo.email_exists(data.owner.email):
            raise ConflictException("This email address is already in use")
        if data.domain and self.tenant_repo.get_by_domain(data.domain):
            raise ConflictException("This domain is already in use")

        settings = TenantSettings(
            contact_info=ContactInfo(email=data.owner.email, phone=data.owner.phone)
        )
        tenant = self.tenant_repo.create_no_commit(
            Tenant(
                name=data.name,
                business_type=data.business_type,
                domain=data.domain,
                settings=settings.model_dump(by_alias=True, exclude_none=True, mode="json"),
            )
        )
        admin_user = self.user_repo.create_no_commit(
            User(
                tenant_id=tenant.id,
                email=data.owner.email,
                password_hash=hash_password(data.owner.password),
                first_name=data.owner.first_name,
                last_name=data.owner.last_name,
                phone=data.owner.phone,
                role=UserRole.ADMIN,
            )
        )
        self.db.commit()
        self.db.refresh(tenant)
        self.db.refresh(admin_user)

        logger.info("Tenant %s created with admin user %s", tenant.id, admin_user.id)
        return {"tenant": tenant, "admin_user": admin_user}

    def set_status(self, tenant_id: str, is_active: bool) -> Tenant:
        """
        Activate or deactivate a tenant. Deactivation blocks all of its users.

        Raises:
            ValidationException: The system tenant cannot be changed
            NotFoundException: Unknown tenant
        """
        if tenant_id == SYSTEM_TENANT_ID:
            raise ValidationException("The system tenant status cannot be changed")

        tenant = self.tenant_repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundException("Tenant not found")

        tenant.is_active = is_active
        tenant = self.tenant_repo.update(tenant)
        logger.info("Tenant %s %s", tenant.id, "activated" if is_active else "deactivated")
        return tenant
