"""Pricing rule model."""

from enum import Enum as PyEnum
from typing import Any, TYPE_CHECKING

from sqlalchemy import String, Integer, Boolean, Text, JSON, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, new_id

if TYPE_CHECKING:
    from app.models.business_type import BusinessType


class PricingRuleType(str, PyEnum):
    """Supported pricing rule types"""

    PERCENTAGE_DISCOUNT = "PERCENTAGE_DISCOUNT"
    FIXED_DISCOUNT = "FIXED_DISCOUNT"
    QUANTITY_DISCOUNT = "QUANTITY_DISCOUNT"
    BULK_PRICING = "BULK_PRICING"
    EXPRESS_SURCHARGE = "EXPRESS_SURCHARGE"
    LOYAL_CUSTOMER_DISCOUNT = "LOYAL_CUSTOMER_DISCOUNT"
    SEASONAL_ADJUSTMENT = "SEASONAL_ADJUSTMENT"


# Calendar months (1-12) of each season name accepted by SEASONAL_ADJUSTMENT
SEASON_MONTHS: dict[str, tuple[int, ...]] = {
    "winter": (12, 1, 2),
    "spring": (3, 4, 5),
    "summer": (6, 7, 8),
    "autumn": (9, 10, 11),
    "fall": (9, 10, 11),
}


class PricingRule(Base, TimestampMixin):
    """
    Conditional price adjustment owned by a business type.

    Active rules are evaluated in ascending `priority`. `conditions`
    decides applicability, `calculation` holds the rule-type specific
    parameters. Both are stored with camelCase keys and validated through
    the schemas in `app.schemas.pricing_rule_schemas` on write.

    `rule_type` is stored as plain text so that a rule written with an
    unknown type is skipped by the engine instead of failing to load.
    """

    __tablename__ = "pricing_rules"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    business_type_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("business_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    rule_type: Mapped[str] = mapped_column(String(50), nullable=False)
    conditions: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    calculation: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    business_type: Mapped["BusinessType"] = relationship(
        "BusinessType", back_populates="pricing_rules"
    )

    __table_args__ = (
        UniqueConstraint("business_type_id", "name", name="uq_pricing_rule_name"),
        Index("ix_pricing_rules_business_type_priority", "business_type_id", "priority"),
    )

    def __repr__(self) -> str:
        return f"<PricingRule(id={self.id}, type={self.rule_type}, priority={self.priority})>"
