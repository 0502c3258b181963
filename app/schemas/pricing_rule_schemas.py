"""
Typed pricing rule configuration.

`conditions` and `calculation` are stored as JSON on the rule. They are
validated here on every write so the engine only ever sees documented keys.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import Field, ValidationError, field_validator, model_validator

from app.models.pricing_rule import PricingRuleType, SEASON_MONTHS
from app.schemas.common import APIModel, StrictAPIModel

DayOfWeek = Annotated[int, Field(ge=0, le=6)]


class RuleConditions(StrictAPIModel):
    """
    When a rule applies. Every key is optional; unset keys are not checked.

    daysOfWeek uses 0 = Sunday through 6 = Saturday.
    """

    min_quantity: float | None = Field(None, ge=0)
    max_quantity: float | None = Field(None, ge=0)
    min_amount: float | None = Field(None, ge=0)
    max_amount: float | None = Field(None, ge=0)
    valid_from: datetime | None = None
    valid_to: datetime | None = None
    days_of_week: list[DayOfWeek] | None = None
    # Informational only (e.g. "m2")
    unit: str | None = None

    @model_validator(mode="after")
    def check_ranges(self) -> "RuleConditions":
        if (
            self.min_quantity is not None
            and self.max_quantity is not None
            and self.min_quantity > self.max_quantity
        ):
            raise ValueError("minQuantity cannot be greater than maxQuantity")
        if (
            self.min_amount is not None
            and self.max_amount is not None
            and self.min_amount > self.max_amount
        ):
            raise ValueError("minAmount cannot be greater than maxAmount")
        if self.valid_from and self.valid_to and self.valid_from > self.valid_to:
            raise ValueError("validFrom cannot be after validTo")
        return self


class PercentageDiscountCalculation(StrictAPIModel):
    percentage: float = Field(..., ge=0, le=100)


class FixedDiscountCalculation(StrictAPIModel):
    amount: float = Field(..., ge=0)


class QuantityDiscountCalculation(StrictAPIModel):
    min_quantity: float = Field(1, gt=0)
    discount_per_item: float = Field(..., ge=0)


class BulkPricingCalculation(StrictAPIModel):
    """newUnitPrice above the average unit price turns the rule into a surcharge."""

    min_quantity: float = Field(1, gt=0)
    new_unit_price: float = Field(..., ge=0)


class ExpressSurchargeCalculation(StrictAPIModel):
    """expressMultiplier wins over expressAmount when both are set."""

    express_multiplier: float | None = Field(None, ge=1)
    express_amount: float | None = Field(None, ge=0)

    @model_validator(mode="after")
    def require_one(self) -> "ExpressSurchargeCalculation":
        if self.express_multiplier is None and self.express_amount is None:
            raise ValueError("expressMultiplier or expressAmount is required")
        return self


class LoyalCustomerDiscountCalculation(StrictAPIModel):
    discount_percentage: float = Field(..., ge=0, le=100)


class SeasonalAdjustment(StrictAPIModel):
    type: Literal["percentage", "fixed"]
    value: float


class SeasonalAdjustmentCalculation(StrictAPIModel):
    """
    Season name to adjustment. Evaluated in insertion order; the first
    season containing the current month is used.
    """

    seasonal: dict[str, SeasonalAdjustment] = Field(..., min_length=1)

    @field_validator("seasonal")
    @classmethod
    def known_seasons(cls, value: dict[str, SeasonalAdjustment]) -> dict[str, SeasonalAdjustment]:
        unknown = [season for season in value if season.lower() not in SEASON_MONTHS]
        if unknown:
            raise ValueError(
                f"Unknown season(s) {unknown}. Valid seasons: {', '.join(SEASON_MONTHS)}"
            )
        return value


CALCULATION_MODELS: dict[PricingRuleType, type[StrictAPIModel]] = {
    PricingRuleType.PERCENTAGE_DISCOUNT: PercentageDiscountCalculation,
    PricingRuleType.FIXED_DISCOUNT: FixedDiscountCalculation,
    PricingRuleType.QUANTITY_DISCOUNT: QuantityDiscountCalculation,
    PricingRuleType.BULK_PRICING: BulkPricingCalculation,
    PricingRuleType.EXPRESS_SURCHARGE: ExpressSurchargeCalculation,
    PricingRuleType.LOYAL_CUSTOMER_DISCOUNT: LoyalCustomerDiscountCalculation,
    PricingRuleType.SEASONAL_ADJUSTMENT: SeasonalAdjustmentCalculation,
}


def to_storage(model: StrictAPIModel) -> dict[str, Any]:
    """JSON-ready dict with camelCase keys, unset keys dropped"""
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")


def normalize_calculation(rule_type: PricingRuleType, data: dict[str, Any]) -> dict[str, Any]:
    """
    Validate a calculation blob against its rule type.

    Raises:
        ValueError: If the blob does not match the rule type's model
    """
    model = CALCULATION_MODELS[rule_type]
    try:
        return to_storage(model.model_validate(data))
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'calculation'}: {error['msg']}"
            for error in e.errors()
        )
        raise ValueError(f"Invalid calculation for {rule_type.value}: {errors}")


class PricingRuleCreate(APIModel):
    """Schema for creating a pricing rule"""

    business_type_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    rule_type: PricingRuleType
    conditions: RuleConditions = Field(default_factory=RuleConditions)
    calculation: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    priority: int = 0

    @model_validator(mode="after")
    def validate_calculation(self) -> "PricingRuleCreate":
        self.calculation = normalize_calculation(self.rule_type, self.calculation)
        return self


class PricingRuleUpdate(APIModel):
    """
    Schema for updating a pricing rule.

    The calculation is re-validated against the resulting rule type by the
    service, since either may change independently.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    rule_type: PricingRuleType | None = None
    conditions: RuleConditions | None = None
    calculation: dict[str, Any] | None = None
    is_active: bool | None = None
    priority: int | None = None


class PricingRuleResponse(APIModel):
    """Schema for pricing rule response"""

    id: str
    business_type_id: str
    name: str
    description: str
    rule_type: str
    conditions: dict[str, Any]
    calculation: dict[str, Any]
    is_active: bool
    priority: int
    created_at: datetime
    updated_at: datetime


class PricingRuleListResponse(APIModel):
    """Schema for list of pricing rules"""

    rules: list[PricingRuleResponse]
    total: int
