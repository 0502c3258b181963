import logging

from sqlalchemy.orm import Session

from app.core.exceptions import (
    BusinessTypeNotFound,
    DuplicateRuleName,
    NotFoundException,
    ValidationException,
)
from app.models.pricing_rule import PricingRule, PricingRuleType
from app.repositories.business_type_repository import BusinessTypeRepository
from app.repositories.pricing_rule_repository import PricingRuleRepository
from app.schemas.pricing_rule_schemas import (
    PricingRuleCreate,
    PricingRuleUpdate,
    normalize_calculation,
    to_storage,
)

logger = logging.getLogger(__name__)


class PricingRuleService:
    """Service for pricing rule administration"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PricingRuleRepository(db)
        self.business_type_repo = BusinessTypeRepository(db)

    def list_rules(self, business_type_id: str, is_active: bool | None = None) -> list[PricingRule]:
        """Rules of a business type in evaluation order"""
        if not self.business_type_repo.get_by_id(business_type_id):
            raise BusinessTypeNotFound()
        return self.repo.get_by_business_type(business_type_id, is_active)

    def get_rule(self, rule_id: str) -> PricingRule:
        rule = self.repo.get_by_id(rule_id)
        if not rule:
            raise NotFoundException("Pricing rule not found")
        return rule

    def _ensure_unique_name(self, business_type_id: str, name: str, rule_id: str | None = None):
        existing = self.repo.get_by_name(business_type_id, name)
        if existing and existing.id != rule_id:
            raise DuplicateRuleName(f"Pricing rule '{name}' already exists")

    def create_rule(self, data: PricingRuleCreate) -> PricingRule:
        """
        Create a rule for an existing business type.

        Raises:
            BusinessTypeNotFound: Unknown business type
            DuplicateRuleName: Name already used within the business type
        """
        if not self.business_type_repo.get_by_id(data.business_type_id):
            raise BusinessTypeNotFound()
        self._ensure_unique_name(data.business_type_id, data.name)

        rule = PricingRule(
            business_type_id=data.business_type_id,
            name=data.name,
            description=data.description,
            rule_type=data.rule_type.value,
            conditions=to_storage(data.conditions),
            calculation=data.calculation,
            is_active=data.is_active,
            priority=data.priority,
        )
        rule = self.repo.create(rule)
        logger.info("Pricing rule %s (%s) created", rule.id, rule.rule_type)
        return rule

    def update_rule(self, rule_id: str, data: PricingRuleUpdate) -> PricingRule:
        """
        Update a rule. The calculation is re-checked whenever the rule type
        or the calculation changes.
        """
        rule = self.get_rule(rule_id)

        if data.name is not None and data.name != rule.name:
            self._ensure_unique_name(rule.business_type_id, data.name, rule.id)
            rule.name = data.name
        if data.description is not None:
            rule.description = data.description
        if data.conditions is not None:
            rule.conditions = to_storage(data.conditions)
        if data.is_active is not None:
            rule.is_active = data.is_active
        if data.priority is not None:
            rule.priority = data.priority

        if data.rule_type is not None or data.calculation is not None:
            calculation = data.calculation if data.calculation is not None else rule.calculation
            try:
                rule_type = data.rule_type or PricingRuleType(rule.rule_type)
                rule.calculation = normalize_calculation(rule_type, calculation)
            except ValueError as e:
                raise ValidationException(str(e))
            rule.rule_type = rule_type.value

        return self.repo.update(rule)

    def delete_rule(self, rule_id: str) -> None:
        rule = self.get_rule(rule_id)
        self.repo.delete(rule)
        logger.info("Pricing rule %s deleted", rule_id)
