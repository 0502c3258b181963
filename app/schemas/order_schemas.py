from datetime import datetime

from pydantic import Field

from app.models.order import OrderStatus
from app.schemas.common import APIModel
from app.schemas.pricing_schemas import ItemBreakdownResponse, PricingItem


class OrderCreate(APIModel):
    """Schema for creating an order; the items are priced on creation"""

    customer_id: str = Field(..., min_length=1)
    business_type_id: str = Field(..., min_length=1)
    items: list[PricingItem] = Field(..., min_length=1)
    notes: str | None = None
    pickup_date: datetime | None = None
    delivery_date: datetime | None = None
    discount_codes: list[str] = Field(default_factory=list)


class OrderUpdate(APIModel):
    status: OrderStatus | None = None
    notes: str | None = None
    paid_amount: float | None = Field(None, ge=0)
    pickup_date: datetime | None = None
    delivery_date: datetime | None = None


class OrderResponse(APIModel):
    id: str
    tenant_id: str
    customer_id: str
    user_id: str
    business_type_id: str
    order_number: str
    status: OrderStatus
    subtotal: float
    discount_total: float
    surcharge_total: float
    total_amount: float
    paid_amount: float
    items: list[ItemBreakdownResponse]
    notes: str | None
    pickup_date: datetime | None
    delivery_date: datetime | None
    created_at: datetime
    updated_at: datetime


class OrderListResponse(APIModel):
    orders: list[OrderResponse]
    total: int
    limit: int
    offset: int
