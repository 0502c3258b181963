from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from app.models.role import UserRole
from app.schemas.common import APIModel, StrictAPIModel


class BusinessTypeReference(StrictAPIModel):
    id: str
    name: str


class RegistrationInfo(StrictAPIModel):
    """Recorded once when a tenant signs up through an app"""

    app_type: str
    app_name: str
    country: str | None = None
    city: str | None = None
    business_types: list[BusinessTypeReference] = Field(default_factory=list)


class ContactInfo(StrictAPIModel):
    email: EmailStr | None = None
    phone: str | None = None


class TenantSettings(StrictAPIModel):
    """Recognized keys of a tenant's settings; anything else is rejected"""

    currency: str = "TRY"
    timezone: str = "Europe/Istanbul"
    language: str = "tr"
    features: dict[str, bool] = Field(default_factory=dict)
    app_slug: str | None = None
    registration_info: RegistrationInfo | None = None
    contact_info: ContactInfo | None = None


class TenantResponse(APIModel):
    """Tenant details response"""

    id: str
    name: str
    business_type: str
    domain: str | None
    is_active: bool
    settings: dict
    created_at: datetime
    updated_at: datetime


class TenantUpdate(APIModel):
    """Update the current tenant's profile (ADMIN or BUSINESS_OWNER)"""

    name: str | None = Field(None, min_length=1, max_length=255)
    domain: str | None = Field(None, max_length=255)
    settings: TenantSettings | None = None


class TenantOwnerCreate(APIModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(None, max_length=50)
    password: str = Field(..., min_length=6)


class TenantCreate(APIModel):
    """Create a tenant together with its ADMIN user (SUPER_ADMIN only)"""

    name: str = Field(..., min_length=1, max_length=255)
    business_type: str = Field(..., min_length=1, max_length=50)
    domain: str | None = Field(None, max_length=255)
    owner: TenantOwnerCreate


class TenantStatusUpdate(APIModel):
    is_active: bool


class TenantOwner(APIModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None
    last_login_at: datetime | None


class TenantStats(APIModel):
    users_count: int
    customers_count: int
    orders_count: int


class TenantSummaryResponse(TenantResponse):
    """Tenant as listed for system administration"""

    status: Literal["ACTIVE", "INACTIVE"]
    owner: TenantOwner | None
    stats: TenantStats


class TenantListResponse(APIModel):
    tenants: list[TenantSummaryResponse]
    total: int
    limit: int
    offset: int


class TenantAdminUser(APIModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None
    role: UserRole
    created_at: datetime


class TenantCreateResponse(APIModel):
    tenant: TenantResponse
    admin_user: TenantAdminUser
