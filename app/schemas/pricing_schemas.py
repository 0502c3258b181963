from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, Field

from app.models.template import ItemType
from app.schemas.common import APIModel, BusinessTypeSummary

# Largest quantity of one line item (m2, pieces, hours)
MAX_QUANTITY = Decimal("100000")


class PricingItem(APIModel):
    """One requested line item. `type` is accepted as an alias of `itemType`."""

    item_type: ItemType = Field(
        ..., validation_alias=AliasChoices("itemType", "item_type", "type")
    )
    template_id: str = Field(..., min_length=1)
    quantity: Decimal = Field(Decimal("1"), gt=0, le=MAX_QUANTITY, decimal_places=3)
    custom_attributes: dict[str, Any] = Field(default_factory=dict)


class PriceCalculationRequest(APIModel):
    """Schema for POST /pricing/calculate"""

    business_type_id: str = Field(..., min_length=1)
    items: list[PricingItem] = Field(..., min_length=1)
    customer_id: str | None = None
    order_date: datetime | None = None
    discount_codes: list[str] = Field(default_factory=list)


class AdjustmentResponse(APIModel):
    rule_id: str
    name: str
    type: str
    amount: float
    description: str


class ItemBreakdownResponse(APIModel):
    item_type: ItemType
    template: dict[str, Any]
    quantity: float
    base_price: float
    unit_price: float
    custom_attributes: dict[str, Any]
    subtotal: float
    total: float
    applied_modifiers: list[str]


class CalculationResponse(APIModel):
    subtotal: float
    discounts: list[AdjustmentResponse]
    surcharges: list[AdjustmentResponse]
    items: list[ItemBreakdownResponse]
    total: float


class PriceCalculationResponse(APIModel):
    """Advisory quote, valid until `validUntil`"""

    calculation: CalculationResponse
    business_type: BusinessTypeSummary
    calculated_at: datetime
    valid_until: datetime
