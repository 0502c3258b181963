from datetime import datetime

from pydantic import EmailStr, Field

from app.schemas.common import APIModel


class CustomerCreate(APIModel):
    """Schema for creating a customer of the current tenant"""

    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=50)
    email: EmailStr | None = None
    address: str = Field(..., min_length=1)
    district: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    notes: str | None = None


class CustomerUpdate(APIModel):
    """Schema for updating a customer"""

    name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, min_length=1, max_length=50)
    email: EmailStr | None = None
    address: str | None = Field(None, min_length=1)
    district: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    notes: str | None = None


class CustomerResponse(APIModel):
    id: str
    tenant_id: str
    name: str
    phone: str
    email: str | None
    address: str
    district: str | None
    city: str | None
    postal_code: str | None
    notes: str | None
    total_orders: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CustomerListResponse(APIModel):
    customers: list[CustomerResponse]
    total: int
    limit: int
    offset: int
