from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator

from app.schemas.common import APIModel, BusinessTypeSummary, StrictAPIModel


class PricingModifier(StrictAPIModel):
    """
    Price effect of choosing an attribute.

    - fixed: `amount` is added once to the item total
    - multiplier: the base price is multiplied by `multiplier`
    """

    type: Literal["fixed", "multiplier"]
    amount: float | None = None
    multiplier: float | None = Field(None, gt=0)

    @model_validator(mode="after")
    def check_value(self) -> "PricingModifier":
        if self.type == "fixed" and self.amount is None:
            raise ValueError("amount is required for fixed modifiers")
        if self.type == "multiplier" and self.multiplier is None:
            raise ValueError("multiplier is required for multiplier modifiers")
        return self


class TemplateAttribute(StrictAPIModel):
    """A customizable option of a template (e.g. stain treatment, fabric type)"""

    label: str | None = None
    type: Literal["text", "number", "select", "boolean"] = "select"
    options: list[str] | None = None
    required: bool = False
    pricing_modifier: PricingModifier | None = None


class TemplateBase(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    base_price: float = Field(..., ge=0)
    category: str = Field("GENERAL", min_length=1, max_length=100)
    attributes: dict[str, TemplateAttribute] = Field(default_factory=dict)
    is_required: bool = False
    is_active: bool = True
    sort_order: int = 0


class ProductTemplateCreate(TemplateBase):
    """Schema for creating a product template"""

    business_type_id: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1, max_length=50)


class ServiceTemplateCreate(TemplateBase):
    """Schema for creating a service template"""

    business_type_id: str = Field(..., min_length=1)
    duration: int = Field(0, ge=0, description="Expected duration in minutes")


class TemplateUpdate(APIModel):
    """Schema for updating either kind of template; unit/duration apply to their kind only"""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    base_price: float | None = Field(None, ge=0)
    category: str | None = Field(None, min_length=1, max_length=100)
    attributes: dict[str, TemplateAttribute] | None = None
    is_required: bool | None = None
    is_active: bool | None = None
    sort_order: int | None = None
    unit: str | None = Field(None, min_length=1, max_length=50)
    duration: int | None = Field(None, ge=0)


class TemplateReorder(APIModel):
    """New display order of the templates of one business type"""

    business_type_id: str = Field(..., min_length=1)
    template_ids: list[str] = Field(..., min_length=1)

    @field_validator("template_ids")
    @classmethod
    def no_duplicates(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("templateIds must not contain duplicates")
        return value


class TemplateResponse(APIModel):
    """Fields shared by product and service template responses"""

    id: str
    business_type_id: str
    name: str
    description: str
    base_price: float
    category: str
    attributes: dict[str, Any]
    is_required: bool
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class ProductTemplateResponse(TemplateResponse):
    unit: str


class ServiceTemplateResponse(TemplateResponse):
    duration: int


class CategoryCount(APIModel):
    name: str
    count: int


class CategoryListResponse(APIModel):
    """Active template categories of a business type"""

    business_type: BusinessTypeSummary
    categories: list[CategoryCount]


class ProductTemplateListResponse(APIModel):
    templates: list[ProductTemplateResponse]
    total: int


class ServiceTemplateListResponse(APIModel):
    templates: list[ServiceTemplateResponse]
    total: int
