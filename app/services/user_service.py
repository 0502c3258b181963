import logging

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException, NotFoundException, ValidationException
from app.core.security import hash_password
from app.models.role import UserRole
from app.models.tenant_context import TenantContext
from app.models.user import User
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository
from app.schemas.user_schemas import ROLE_GROUPS, SystemUserCreate, UserCreate

logger = logging.getLogger(__name__)

STATUS_FILTERS = {"ALL": None, "ACTIVE": True, "INACTIVE": False}


class UserService:
    """Service layer for user management inside a tenant and across tenants"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.tenant_repo = TenantRepository(db)

    def _new_user(self, tenant_id: str, data: UserCreate) -> User:
        if data.role == UserRole.SUPER_ADMIN:
            raise ValidationException("SUPER_ADMIN users cannot be created through the API")
        if self.user_repo.email_exists(data.email):
            raise ConflictException("This email address is already in use")

        user = self.user_repo.create(
            User(
                tenant_id=tenant_id,
                email=data.email,
                password_hash=hash_password(data.password),
                first_name=data.first_name,
                last_name=data.last_name,
                phone=data.phone,
                role=data.role,
            )
        )
        logger.info("User %s created in tenant %s with role %s", user.id, tenant_id, user.role.value)
        return user

    def _get_user(self, user_id: str) -> User:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundException("User not found")
        return user

    @staticmethod
    def _system_view(user: User) -> dict:
        return {
            "id": user.id,
            "tenant_id": user.tenant_id,
            "email": user.email,
            "phone": user.phone,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "role": user.role,
            "is_active": user.is_active,
            "last_login_at": user.last_login_at,
            "created_at": user.created_at,
            "status": "ACTIVE" if user.is_active else "INACTIVE",
            "tenant": user.tenant,
        }

    def list_tenant_users(self, context: TenantContext, limit: int = 20, offset: int = 0) -> dict:
        users, total = self.user_repo.get_active_by_tenant(context.tenant_filter(), limit, offset)
        return {"users": users, "total": total, "limit": limit, "offset": offset}

    def create_tenant_user(self, data: UserCreate, context: TenantContext) -> User:
        """
        Add a user to the caller's tenant.

        Raises:
            ValidationException: SUPER_ADMIN role requested
            ConflictException: Email already in use
        """
        return self._new_user(context.tenant_id, data)

    def list_all_users(
        self,
        search: str | None = None,
        role: str = "ALL",
        status: str = "ALL",
        limit: int = 20,
        offset: int = 0,
    ) -> dict:
        """
        List users of every customer tenant for system administration.

        Args:
            search: Substring of first name, last name or email
            role: ALL, ROLE_ADMIN, ROLE_USER or a single role name
            status: ALL, ACTIVE or INACTIVE
        """
        if role == "ALL":
            roles = None
        elif role in ROLE_GROUPS:
            roles = ROLE_GROUPS[role]
        else:
            roles = (UserRole(role),)

        users, total = self.user_repo.search(search, roles, STATUS_FILTERS[status], limit, offset)
        return {
            "users": [self._system_view(user) for user in users],
            "total": total,
            "limit": limit,
            "offset": offset,
        }

    def create_system_user(self, data: SystemUserCreate) -> dict:
        """
        Add a user to any tenant.

        Raises:
            ValidationException: Unknown tenant or SUPER_ADMIN role requested
            ConflictException: Email already in use
        """
        if not self.tenant_repo.get_by_id(data.tenant_id):
            raise ValidationException("Invalid tenant selection")
        return self._system_view(self._new_user(data.tenant_id, data))

    def get_user_detail(self, user_id: str) -> dict:
        user = self._get_user(user_id)
        detail = self._system_view(user)
        detail["orders_count"] = self.user_repo.count_orders(user.id)
        return detail

    def set_status(self, user_id: str, is_active: bool) -> dict:
        """
        Activate or deactivate a user. Inactive users cannot sign in.

        Raises:
            NotFoundException: Unknown user
            ValidationException: Target is a SUPER_ADMIN
        """
        user = self._get_user(user_id)
        if user.role == UserRole.SUPER_ADMIN:
            raise ValidationException("The status of a system administrator cannot be changed")

        user.is_active = is_active
        user = self.user_repo.update(user)
        logger.info("User %s %s", user.id, "activated" if is_active else "deactivated")
        return self._system_view(user)

    def delete_user(self, user_id: str) -> None:
        """
        Remove a user permanently.

        Raises:
            NotFoundException: Unknown user
            ValidationException: Target is a SUPER_ADMIN
            ConflictException: The user has taken orders; deactivate instead
        """
        user = self._get_user(user_id)
        if user.role == UserRole.SUPER_ADMIN:
            raise ValidationException("A system administrator cannot be deleted")
        if self.user_repo.count_orders(user.id):
            raise ConflictException("The user has orders; deactivate the user instead")

        self.user_repo.delete(user)
        logger.info("User %s deleted", user_id)
