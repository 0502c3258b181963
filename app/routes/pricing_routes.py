from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_roles
from app.models.role import UserRole
from app.services.pricing_service import PricingService
from app.services.pricing_rule_service import PricingRuleService
from app.schemas.common import MessageResponse
from app.schemas.pricing_schemas import PriceCalculationRequest, PriceCalculationResponse
from app.schemas.pricing_rule_schemas import (
    PricingRuleCreate,
    PricingRuleListResponse,
    PricingRuleResponse,
    PricingRuleUpdate,
)

router = APIRouter()

super_admin = require_roles(UserRole.SUPER_ADMIN)


@router.post(
    "/calculate",
    response_model=PriceCalculationResponse,
    dependencies=[Depends(get_current_user)],
)
async def calculate_price(data: PriceCalculationRequest, db: Session = Depends(get_db)):
    """
    Quote a set of items against a business type's catalog and rules.

    Nothing is stored. The quote is advisory and carries a `validUntil`
    timestamp. An unknown template fails the whole calculation.
    """
    service = PricingService(db)
    return service.calculate(data)


@router.get(
    "/rules/{business_type_id}",
    response_model=PricingRuleListResponse,
    dependencies=[Depends(get_current_user)],
)
async def list_pricing_rules(
    business_type_id: str,
    is_active: bool | None = Query(None, alias="isActive"),
    db: Session = Depends(get_db),
):
    """Rules of a business type in application order (ascending priority)"""
    service = PricingRuleService(db)
    rules = service.list_rules(business_type_id, is_active)
    return PricingRuleListResponse(rules=rules, total=len(rules))


@router.post(
    "/rules",
    response_model=PricingRuleResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(super_admin)],
)
async def create_pricing_rule(data: PricingRuleCreate, db: Session = Depends(get_db)):
    """
    Create a pricing rule.

    - **Requires SUPER_ADMIN**
    - `calculation` is validated against the keys of its `ruleType`
    """
    service = PricingRuleService(db)
    return service.create_rule(data)


@router.put(
    "/rules/{rule_id}", response_model=PricingRuleResponse, dependencies=[Depends(super_admin)]
)
async def update_pricing_rule(
    rule_id: str, data: PricingRuleUpdate, db: Session = Depends(get_db)
):
    service = PricingRuleService(db)
    return service.update_rule(rule_id, data)


@router.delete(
    "/rules/{rule_id}", response_model=MessageResponse, dependencies=[Depends(super_admin)]
)
async def delete_pricing_rule(rule_id: str, db: Session = Depends(get_db)):
    service = PricingRuleService(db)
    service.delete_rule(rule_id)
    return {"message": "Pricing rule deleted"}
