from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from app.models.role import UserRole
from app.schemas.common import APIModel

# Role filter values of the system-wide user list besides the role names
ROLE_GROUPS: dict[str, tuple[UserRole, ...]] = {
    "ROLE_ADMIN": (UserRole.ADMIN, UserRole.SUPER_ADMIN),
    "ROLE_USER": (UserRole.EMPLOYEE, UserRole.MANAGER),
}


class UserCreate(APIModel):
    """Schema for adding a user to the current tenant"""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(None, max_length=50)
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.EMPLOYEE


class SystemUserCreate(UserCreate):
    """Schema for adding a user to any tenant (SUPER_ADMIN only)"""

    tenant_id: str = Field(..., min_length=1)


class UserStatusUpdate(APIModel):
    is_active: bool


class TenantUserResponse(APIModel):
    """A user as listed inside its own tenant"""

    id: str
    email: str
    phone: str | None
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    last_login_at: datetime | None
    created_at: datetime


class TenantUserListResponse(APIModel):
    users: list[TenantUserResponse]
    total: int
    limit: int
    offset: int


class UserTenant(APIModel):
    id: str
    name: str
    business_type: str


class SystemUserResponse(TenantUserResponse):
    """A user as seen by system administration"""

    tenant_id: str
    status: Literal["ACTIVE", "INACTIVE"]
    tenant: UserTenant


class SystemUserListResponse(APIModel):
    users: list[SystemUserResponse]
    total: int
    limit: int
    offset: int


class UserDetailResponse(SystemUserResponse):
    orders_count: int
