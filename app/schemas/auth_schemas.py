from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from app.models.role import UserRole
from app.schemas.common import APIModel


class RegisterRequest(APIModel):
    """Self-service sign up: creates a tenant and its first user"""

    app_slug: Literal["laundry", "restaurant", "hotel"] = "laundry"
    tenant_name: str = Field(..., min_length=1, max_length=255)
    domain: str | None = Field(None, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    email: EmailStr
    phone: str | None = Field(None, max_length=50)
    password: str = Field(..., min_length=6)
    business_type_ids: list[str] = Field(default_factory=list)
    country: str | None = None
    city: str | None = None


class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    tenant_id: str | None = None


class RefreshRequest(APIModel):
    refresh_token: str = Field(..., min_length=1)


class TokenPair(APIModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(APIModel):
    id: str
    tenant_id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None
    role: UserRole
    is_active: bool
    last_login_at: datetime | None


class AuthTenant(APIModel):
    id: str
    name: str
    domain: str | None
    business_type: str
    is_active: bool


class AppInfo(APIModel):
    slug: str
    name: str
    type: str


class AuthResponse(APIModel):
    """Returned by register and login"""

    user: UserResponse
    tenant: AuthTenant
    tokens: TokenPair
    app: AppInfo | None = None
