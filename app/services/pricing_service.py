from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import BusinessTypeNotFound, TemplateNotFound
from app.models.business_type import BusinessType
from app.models.pricing_rule import PricingRule
from app.repositories.business_type_repository import BusinessTypeRepository
from app.repositories.pricing_rule_repository import PricingRuleRepository
from app.repositories.template_repository import Template, TemplateRepository
from app.schemas.pricing_schemas import PriceCalculationRequest, PricingItem
from app.services.pricing_engine import (
    PriceCalculation,
    RuleSnapshot,
    TemplateSnapshot,
    as_utc,
    calculate_price,
    price_item,
    to_decimal,
)


def template_snapshot(template: Template) -> TemplateSnapshot:
    return TemplateSnapshot(
        id=template.id,
        item_type=template.item_type.value,
        name=template.name,
        description=template.description,
        base_price=to_decimal(template.base_price),
        category=template.category,
        attributes=dict(template.attributes or {}),
        unit=getattr(template, "unit", None),
        duration=getattr(template, "duration", None),
    )


def rule_snapshot(rule: PricingRule) -> RuleSnapshot:
    return RuleSnapshot(
        id=rule.id,
        name=rule.name,
        description=rule.description,
        rule_type=rule.rule_type,
        conditions=dict(rule.conditions or {}),
        calculation=dict(rule.calculation or {}),
        priority=rule.priority,
    )


def serialize_calculation(calculation: PriceCalculation) -> dict[str, Any]:
    """Plain dict of a calculation with money as floats"""

    def adjustment(a):
        return {
            "rule_id": a.rule_id,
            "name": a.name,
            "type": a.type,
            "amount": float(a.amount),
            "description": a.description,
        }

    return {
        "subtotal": float(calculation.subtotal),
        "discounts": [adjustment(d) for d in calculation.discounts],
        "surcharges": [adjustment(s) for s in calculation.surcharges],
        "items": [
            {
                "item_type": item.item_type,
                "template": item.template,
                "quantity": float(item.quantity),
                "base_price": float(item.base_price),
                "unit_price": float(item.unit_price),
                "custom_attributes": item.custom_attributes,
                "subtotal": float(item.subtotal),
                "total": float(item.total),
                "applied_modifiers": list(item.applied_modifiers),
            }
            for item in calculation.items
        ],
        "total": float(calculation.total),
    }


class PricingService:
    """
    Loads catalog snapshots and runs the pricing engine.

    Business types are a shared catalog, so no tenant filter applies here.
    """

    def __init__(self, db: Session):
        self.db = db
        self.business_type_repo = BusinessTypeRepository(db)
        self.rule_repo = PricingRuleRepository(db)

    def get_business_type(self, business_type_id: str) -> BusinessType:
        business_type = self.business_type_repo.get_by_id(business_type_id)
        if not business_type:
            raise BusinessTypeNotFound()
        return business_type

    def load_template(self, business_type_id: str, item: PricingItem) -> TemplateSnapshot:
        """
        Raises:
            TemplateNotFound: Template missing or owned by another business type
        """
        repo = TemplateRepository(self.db, item.item_type)
        template = repo.get_in_business_type(item.template_id, business_type_id)
        if not template:
            raise TemplateNotFound(f"Template not found: {item.template_id}")
        return template_snapshot(template)

    def price(
        self, request: PriceCalculationRequest
    ) -> tuple[BusinessType, PriceCalculation, datetime]:
        """
        Price a request without formatting the result.

        Every template is resolved before any rule runs, so an unknown
        template fails the whole calculation.

        Returns:
            Tuple of (business type, calculation, calculation time)
        """
        business_type = self.get_business_type(request.business_type_id)
        rules = [
            rule_snapshot(rule)
            for rule in self.rule_repo.get_by_business_type(business_type.id, is_active=True)
        ]
        items = [
            price_item(
                self.load_template(business_type.id, item),
                item.quantity,
                item.custom_attributes,
            )
            for item in request.items
        ]

        calculated_at = datetime.now(timezone.utc)
        order_date = as_utc(request.order_date) if request.order_date else calculated_at

        calculation = calculate_price(
            items,
            rules,
            order_date=order_date,
            calculated_at=calculated_at,
            customer_id=request.customer_id,
            discount_codes=request.discount_codes,
        )
        return business_type, calculation, calculated_at

    def calculate(self, request: PriceCalculationRequest) -> dict[str, Any]:
        """Quote for POST /pricing/calculate"""
        business_type, calculation, calculated_at = self.price(request)
        return {
            "calculation": serialize_calculation(calculation),
            "business_type": {
                "id": business_type.id,
                "name": business_type.name,
                "display_name": business_type.display_name,
            },
            "calculated_at": calculated_at,
            "valid_until": calculated_at + timedelta(minutes=settings.QUOTE_VALIDITY_MINUTES),
        }
