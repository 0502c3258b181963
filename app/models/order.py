from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Any, TYPE_CHECKING

from sqlalchemy import String, Numeric, ForeignKey, DateTime, Text, JSON, Index, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, new_id

if TYPE_CHECKING:
    from app.models.customer import Customer


class OrderStatus(str, PyEnum):
    """Order lifecycle status"""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Order(Base, TimestampMixin):
    """
    Customer orders priced by the pricing engine.

    Amounts are the calculation totals at creation time; `items` keeps the
    per-item breakdown that produced them. Cancelled orders are kept with
    status CANCELLED rather than deleted.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    customer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    business_type_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("business_types.id"), nullable=False
    )
    order_number: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, native_enum=False), nullable=False, default=OrderStatus.PENDING
    )
    subtotal: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    discount_total: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False, default=0
    )
    surcharge_total: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False, default=0
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False, default=0
    )
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    pickup_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    delivery_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    customer: Mapped["Customer"] = relationship("Customer", back_populates="orders")

    __table_args__ = (
        UniqueConstraint("tenant_id", "order_number", name="uq_order_tenant_number"),
        Index("ix_orders_tenant_status", "tenant_id", "status"),
    )
