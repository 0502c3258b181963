"""Product and service template models."""

from decimal import Decimal
from enum import Enum as PyEnum
from typing import Any, TYPE_CHECKING

from sqlalchemy import String, Integer, Boolean, Numeric, Text, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, new_id

if TYPE_CHECKING:
    from app.models.business_type import BusinessType


class ItemType(str, PyEnum):
    """Kind of catalog template a priced item refers to"""

    PRODUCT = "product"
    SERVICE = "service"


class TemplateMixin(TimestampMixin):
    """
    Columns shared by product and service templates.

    `attributes` maps an attribute key to its definition (label, options,
    optional pricing modifier). It is validated through
    `app.schemas.template_schemas.TemplateAttribute` before being written.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    base_price: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="GENERAL")
    attributes: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class ProductTemplate(Base, TemplateMixin):
    """Sellable product priced per unit (m2, piece, kg)"""

    __tablename__ = "product_templates"

    item_type = ItemType.PRODUCT

    business_type_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("business_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    unit: Mapped[str] = mapped_column(String(50), nullable=False)

    business_type: Mapped["BusinessType"] = relationship(
        "BusinessType", back_populates="product_templates"
    )

    __table_args__ = (
        UniqueConstraint("business_type_id", "name", name="uq_product_template_name"),
    )


class ServiceTemplate(Base, TemplateMixin):
    """Service priced per execution, with an expected duration in minutes"""

    __tablename__ = "service_templates"

    item_type = ItemType.SERVICE

    business_type_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("business_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    business_type: Mapped["BusinessType"] = relationship(
        "BusinessType", back_populates="service_templates"
    )

    __table_args__ = (
        UniqueConstraint("business_type_id", "name", name="uq_service_template_name"),
    )


TEMPLATE_MODELS: dict[ItemType, type[ProductTemplate] | type[ServiceTemplate]] = {
    ItemType.PRODUCT: ProductTemplate,
    ItemType.SERVICE: ServiceTemplate,
}
