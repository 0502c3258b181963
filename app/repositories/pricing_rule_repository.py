from sqlalchemy.orm import Session
from app.models.pricing_rule import PricingRule


class PricingRuleRepository:
    """Repository for PricingRule data access"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, rule_id: str) -> PricingRule | None:
        return self.db.query(PricingRule).filter(PricingRule.id == rule_id).first()

    def get_by_business_type(
        self, business_type_id: str, is_active: bool | None = None
    ) -> list[PricingRule]:
        """
        Rules of a business type in evaluation order.

        Ties on priority keep creation order so evaluation is stable.
        """
        query = self.db.query(PricingRule).filter(PricingRule.business_type_id == business_type_id)
        if is_active is not None:
            query = query.filter(PricingRule.is_active == is_active)
        return query.order_by(PricingRule.priority, PricingRule.created_at, PricingRule.id).all()

    def get_by_name(self, business_type_id: str, name: str) -> PricingRule | None:
        return (
            self.db.query(PricingRule)
            .filter(PricingRule.business_type_id == business_type_id, PricingRule.name == name)
            .first()
        )

    def create(self, rule: PricingRule) -> PricingRule:
        self.db.add(rule)
        self.db.commit()
        self.db.refresh(rule)
        return rule

    def update(self, rule: PricingRule) -> PricingRule:
        self.db.commit()
        self.db.refresh(rule)
        return rule

    def delete(self, rule: PricingRule) -> None:
        self.db.delete(rule)
        self.db.commit()
