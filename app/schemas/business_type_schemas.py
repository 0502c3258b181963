from datetime import datetime
from pydantic import Field, field_validator
from app.schemas.common import APIModel
from app.schemas.template_schemas import ProductTemplateResponse, ServiceTemplateResponse


class BusinessTypeCreate(APIModel):
    """Schema for creating a business type"""

    name: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    icon: str | None = Field(None, max_length=100)
    color: str | None = Field(None, max_length=20)
    sort_order: int = 0


class BusinessTypeUpdate(APIModel):
    """Schema for updating a business type"""

    name: str | None = Field(None, min_length=1, max_length=100)
    display_name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    icon: str | None = Field(None, max_length=100)
    color: str | None = Field(None, max_length=20)
    sort_order: int | None = None
    is_active: bool | None = None


class BusinessTypeReorder(APIModel):
    business_type_ids: list[str] = Field(..., min_length=1)

    @field_validator("business_type_ids")
    @classmethod
    def no_duplicates(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("businessTypeIds must not contain duplicates")
        return value


class BusinessTypeResponse(APIModel):
    """Schema for business type response"""

    id: str
    name: str
    display_name: str
    description: str | None
    icon: str | None
    color: str | None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class BusinessTypeDetailResponse(BusinessTypeResponse):
    """Business type with its active templates"""

    product_templates: list[ProductTemplateResponse]
    service_templates: list[ServiceTemplateResponse]


class BusinessTypeListResponse(APIModel):
    business_types: list[BusinessTypeResponse]
    total: int
