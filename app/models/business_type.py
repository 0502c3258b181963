"""Business type catalog model."""

from typing import TYPE_CHECKING

from sqlalchemy import String, Integer, Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, new_id

if TYPE_CHECKING:
    from app.models.template import ProductTemplate, ServiceTemplate
    from app.models.pricing_rule import PricingRule


class BusinessType(Base, TimestampMixin):
    """
    Catalog classification shared by all tenants (e.g. carpet cleaning,
    dry cleaning). Scopes product templates, service templates and
    pricing rules.
    """

    __tablename__ = "business_types"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    product_templates: Mapped[list["ProductTemplate"]] = relationship(
        "ProductTemplate", back_populates="business_type", cascade="all, delete-orphan"
    )
    service_templates: Mapped[list["ServiceTemplate"]] = relationship(
        "ServiceTemplate", back_populates="business_type", cascade="all, delete-orphan"
    )
    pricing_rules: Mapped[list["PricingRule"]] = relationship(
        "PricingRule", back_populates="business_type", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<BusinessType(id={self.id}, name='{self.name}')>"
