"""
Pricing rule engine.

Pure functions over immutable snapshots of templates and pricing rules.
Nothing here touches the database, so the engine can be exercised without
HTTP or a session (see tests/test_pricing_engine.py).

Flow:
1. price_item() prices each requested line from its template snapshot
2. calculate_price() sums the items and folds the business type's rules
   over the result in ascending priority
3. Each rule reads the same CalculationContext (original subtotal, total
   quantity, dates) and contributes one independently rounded adjustment
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Context, Decimal, ROUND_HALF_UP
from functools import reduce
from typing import Any, Callable, Iterable

from app.models.pricing_rule import PricingRuleType, SEASON_MONTHS

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
# Cents of amounts beyond the default 28 digits must still be representable
MONEY_CONTEXT = Context(prec=60, rounding=ROUND_HALF_UP)


def round2(value: Decimal) -> Decimal:
    """Round to cents, halves away from zero"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP, context=MONEY_CONTEXT)


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise TypeError(f"Expected a number, got {value!r}")
    return Decimal(str(value))


def _num(value: Decimal) -> str:
    """Human readable number without trailing zeros"""
    return format(value.normalize(), "f")


def as_utc(value: datetime | str) -> datetime:
    """Parse ISO strings and treat naive datetimes as UTC"""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def sunday_first_weekday(value: datetime) -> int:
    """Day of week with 0 = Sunday and 6 = Saturday"""
    return (value.weekday() + 1) % 7


@dataclass(frozen=True)
class TemplateSnapshot:
    """Catalog template as read at calculation time"""

    id: str
    item_type: str
    name: str
    description: str
    base_price: Decimal
    category: str
    attributes: dict[str, Any] = field(default_factory=dict)
    unit: str | None = None
    duration: int | None = None

    def info(self) -> dict[str, Any]:
        """Template summary returned with each item breakdown"""
        info = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
        }
        if self.unit is not None:
            info["unit"] = self.unit
        if self.duration is not None:
            info["duration"] = self.duration
        return info


@dataclass(frozen=True)
class RuleSnapshot:
    """
    Pricing rule as read at calculation time.

    `conditions` and `calculation` are the stored camelCase dicts. They are
    validated on write, but rules stored before validation existed (or
    edited directly in the database) may still be malformed, which is why
    apply_rule() isolates failures per rule.
    """

    id: str
    name: str
    description: str
    rule_type: str
    conditions: dict[str, Any]
    calculation: dict[str, Any]
    priority: int = 0


@dataclass(frozen=True)
class CalculationContext:
    """Inputs every rule's conditions are evaluated against"""

    subtotal: Decimal
    total_quantity: Decimal
    order_date: datetime
    calculated_at: datetime
    customer_id: str | None = None


@dataclass(frozen=True)
class Adjustment:
    """A discount or surcharge. `amount` is always a positive magnitude."""

    rule_id: str
    name: str
    type: str
    amount: Decimal
    description: str


@dataclass(frozen=True)
class ItemBreakdown:
    item_type: str
    template: dict[str, Any]
    quantity: Decimal
    base_price: Decimal
    unit_price: Decimal
    custom_attributes: dict[str, Any]
    subtotal: Decimal
    total: Decimal
    applied_modifiers: tuple[str, ...] = ()


@dataclass(frozen=True)
class PriceCalculation:
    subtotal: Decimal
    items: tuple[ItemBreakdown, ...] = ()
    discounts: tuple[Adjustment, ...] = ()
    surcharges: tuple[Adjustment, ...] = ()

    @property
    def discount_total(self) -> Decimal:
        return sum((d.amount for d in self.discounts), ZERO)

    @property
    def surcharge_total(self) -> Decimal:
        return sum((s.amount for s in self.surcharges), ZERO)

    @property
    def total(self) -> Decimal:
        """Never negative, however much the discounts add up to"""
        return max(ZERO, self.subtotal - self.discount_total + self.surcharge_total)

    def with_discount(self, adjustment: Adjustment) -> "PriceCalculation":
        return replace(self, discounts=self.discounts + (adjustment,))

    def with_surcharge(self, adjustment: Adjustment) -> "PriceCalculation":
        return replace(self, surcharges=self.surcharges + (adjustment,))


def price_item(
    template: TemplateSnapshot,
    quantity: Decimal,
    custom_attributes: dict[str, Any] | None = None,
) -> ItemBreakdown:
    """
    Price one line item.

    Multiplier modifiers scale the base price before the quantity is
    applied. Fixed modifiers are added once to the item total, whatever
    the quantity. Only supplied attributes that the template configures
    with a pricing modifier have an effect.
    """
    custom_attributes = custom_attributes or {}
    unit_price = template.base_price
    fixed_total = ZERO
    notes: list[str] = []

    for key in custom_attributes:
        config = template.attributes.get(key)
        modifier = config.get("pricingModifier") if isinstance(config, dict) else None
        if not modifier:
            continue

        if modifier.get("type") == "multiplier":
            multiplier = to_decimal(modifier.get("multiplier", 1))
            unit_price = unit_price * multiplier
            notes.append(f"{key}: x{_num(multiplier)} multiplier")
        elif modifier.get("type") == "fixed":
            amount = to_decimal(modifier.get("amount", 0))
            fixed_total += amount
            notes.append(f"{key}: +{_num(amount)}")

    subtotal = unit_price * quantity
    return ItemBreakdown(
        item_type=template.item_type,
        template=template.info(),
        quantity=quantity,
        base_price=template.base_price,
        unit_price=unit_price,
        custom_attributes=dict(custom_attributes),
        subtotal=subtotal,
        total=subtotal + fixed_total,
        applied_modifiers=tuple(notes),
    )


def should_apply_rule(conditions: dict[str, Any], context: CalculationContext) -> bool:
    """
    Decide whether a rule's conditions hold for the calculation.

    Unset (or zero) thresholds are not checked. Quantity and amount bounds
    are inclusive, as is the validFrom/validTo window.
    """
    min_quantity = conditions.get("minQuantity")
    if min_quantity and context.total_quantity < to_decimal(min_quantity):
        return False
    max_quantity = conditions.get("maxQuantity")
    if max_quantity and context.total_quantity > to_decimal(max_quantity):
        return False

    min_amount = conditions.get("minAmount")
    if min_amount and context.subtotal < to_decimal(min_amount):
        return False
    max_amount = conditions.get("maxAmount")
    if max_amount and context.subtotal > to_decimal(max_amount):
        return False

    order_date = as_utc(context.order_date)
    if conditions.get("validFrom") and order_date < as_utc(conditions["validFrom"]):
        return False
    if conditions.get("validTo") and order_date > as_utc(conditions["validTo"]):
        return False

    days_of_week = conditions.get("daysOfWeek")
    if days_of_week and sunday_first_weekday(order_date) not in days_of_week:
        return False

    return True


# Rule handlers return a signed, unrounded amount: negative is a discount.
RuleHandler = Callable[[dict[str, Any], CalculationContext], tuple[Decimal, str]]


def _percentage_discount(calc: dict[str, Any], context: CalculationContext) -> tuple[Decimal, str]:
    percentage = to_decimal(calc.get("percentage", 0))
    return -(context.subtotal * percentage / HUNDRED), f"{_num(percentage)}% discount"


def _fixed_discount(calc: dict[str, Any], context: CalculationContext) -> tuple[Decimal, str]:
    amount = to_decimal(calc.get("amount", 0))
    return -amount, f"{_num(amount)} off"


def _quantity_discount(calc: dict[str, Any], context: CalculationContext) -> tuple[Decimal, str]:
    if context.total_quantity < to_decimal(calc.get("minQuantity") or 1):
        return ZERO, ""
    per_item = to_decimal(calc.get("discountPerItem", 0))
    return (
        -(context.total_quantity * per_item),
        f"Unit discount for {_num(context.total_quantity)} items",
    )


def _bulk_pricing(calc: dict[str, Any], context: CalculationContext) -> tuple[Decimal, str]:
    if context.total_quantity < to_decimal(calc.get("minQuantity") or 1):
        return ZERO, ""
    new_unit_price = to_decimal(calc.get("newUnitPrice", 0))
    bulk_total = context.total_quantity * new_unit_price
    return bulk_total - context.subtotal, f"Bulk price ({_num(context.total_quantity)} items)"


def _express_surcharge(calc: dict[str, Any], context: CalculationContext) -> tuple[Decimal, str]:
    if calc.get("expressMultiplier"):
        extra = to_decimal(calc["expressMultiplier"]) - 1
        return (
            context.subtotal * extra,
            f"Express service (+{_num(round2(extra * HUNDRED))}%)",
        )
    if calc.get("expressAmount"):
        amount = to_decimal(calc["expressAmount"])
        return amount, f"Express service (+{_num(amount)})"
    return ZERO, ""


def _loyal_customer_discount(calc: dict[str, Any], context: CalculationContext) -> tuple[Decimal, str]:
    # No order-history tier check: applies whenever the conditions match
    if not calc.get("discountPercentage"):
        return ZERO, ""
    percentage = to_decimal(calc["discountPercentage"])
    return (
        -(context.subtotal * percentage / HUNDRED),
        f"Loyal customer discount ({_num(percentage)}%)",
    )


def _seasonal_adjustment(calc: dict[str, Any], context: CalculationContext) -> tuple[Decimal, str]:
    # Season follows the month the quote is calculated in, not the order date
    month = context.calculated_at.month
    for season, adjustment in (calc.get("seasonal") or {}).items():
        if month not in SEASON_MONTHS.get(season.lower(), ()):
            continue
        value = to_decimal(adjustment.get("value", 0))
        if adjustment.get("type") == "percentage":
            amount = context.subtotal * value / HUNDRED
        else:
            amount = value
        return amount, f"{season} price adjustment"
    return ZERO, ""


RULE_HANDLERS: dict[str, RuleHandler] = {
    PricingRuleType.PERCENTAGE_DISCOUNT.value: _percentage_discount,
    PricingRuleType.FIXED_DISCOUNT.value: _fixed_discount,
    PricingRuleType.QUANTITY_DISCOUNT.value: _quantity_discount,
    PricingRuleType.BULK_PRICING.value: _bulk_pricing,
    PricingRuleType.EXPRESS_SURCHARGE.value: _express_surcharge,
    PricingRuleType.LOYAL_CUSTOMER_DISCOUNT.value: _loyal_customer_discount,
    PricingRuleType.SEASONAL_ADJUSTMENT.value: _seasonal_adjustment,
}


def compute_adjustment(rule: RuleSnapshot, context: CalculationContext) -> tuple[Decimal, str]:
    """
    Signed adjustment of a rule, rounded to cents.

    Raises:
        KeyError: If the rule type has no handler
    """
    handler = RULE_HANDLERS[rule.rule_type]
    amount, description = handler(rule.calculation or {}, context)
    return round2(amount), description or rule.description or rule.name


def apply_rule(
    calculation: PriceCalculation, rule: RuleSnapshot, context: CalculationContext
) -> PriceCalculation:
    """
    Apply one rule, returning a new calculation.

    A rule that fails to evaluate is logged and skipped so the remaining
    rules still apply.
    """
    if rule.rule_type not in RULE_HANDLERS:
        logger.warning("Unsupported pricing rule type %s on rule %s", rule.rule_type, rule.id)
        return calculation

    try:
        if not should_apply_rule(rule.conditions or {}, context):
            return calculation
        amount, description = compute_adjustment(rule, context)
    except Exception:
        logger.exception("Error applying pricing rule %s, skipping it", rule.id)
        return calculation

    if amount == ZERO:
        return calculation

    adjustment = Adjustment(
        rule_id=rule.id,
        name=rule.name,
        type=rule.rule_type,
        amount=abs(amount),
        description=description,
    )
    if amount > ZERO:
        return calculation.with_surcharge(adjustment)
    return calculation.with_discount(adjustment)


def apply_discount_codes(
    calculation: PriceCalculation, discount_codes: Iterable[str], customer_id: str | None = None
) -> PriceCalculation:
    """Discount codes are accepted but have no effect yet."""
    codes = list(discount_codes)
    if codes:
        logger.info("Discount codes are not supported yet, ignoring %s", codes)
    return calculation


def calculate_price(
    items: Iterable[ItemBreakdown],
    rules: Iterable[RuleSnapshot],
    order_date: datetime,
    calculated_at: datetime,
    customer_id: str | None = None,
    discount_codes: Iterable[str] = (),
) -> PriceCalculation:
    """
    Sum priced items and fold the rules over them in ascending priority.

    Rules with equal priority keep their given order. Every rule sees the
    original subtotal and quantity; their adjustments accumulate.
    """
    items = tuple(items)
    subtotal = sum((item.total for item in items), ZERO)
    context = CalculationContext(
        subtotal=subtotal,
        total_quantity=sum((item.quantity for item in items), ZERO),
        order_date=order_date,
        calculated_at=calculated_at,
        customer_id=customer_id,
    )

    ordered_rules = sorted(rules, key=lambda rule: rule.priority)
    calculation = reduce(
        lambda current, rule: apply_rule(current, rule, context),
        ordered_rules,
        PriceCalculation(subtotal=subtotal, items=items),
    )
    return apply_discount_codes(calculation, discount_codes, customer_id)
