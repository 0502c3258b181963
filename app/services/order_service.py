import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException
from app.models.order import Order, OrderStatus
from app.models.tenant_context import TenantContext
from app.repositories.customer_repository import CustomerRepository
from app.repositories.order_repository import OrderRepository
from app.schemas.order_schemas import OrderCreate, OrderUpdate
from app.schemas.pricing_schemas import ItemBreakdownResponse, PriceCalculationRequest
from app.services.pricing_engine import round2, to_decimal
from app.services.pricing_service import PricingService, serialize_calculation

logger = logging.getLogger(__name__)


class OrderService:
    """Service for order business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepository(db)
        self.customer_repo = CustomerRepository(db)
        self.pricing = PricingService(db)

    def _next_order_number(self, tenant_id: str) -> str:
        """Date prefix plus a four digit daily sequence, e.g. 202610190001"""
        prefix = datetime.now(timezone.utc).strftime("%Y%m%d")
        last = self.repo.get_last_number_with_prefix(tenant_id, prefix)
        sequence = int(last[len(prefix):]) + 1 if last else 1
        return f"{prefix}{sequence:04d}"

    def create_order(self, data: OrderCreate, context: TenantContext) -> Order:
        """
        Price the items and store the order.

        The order and the customer's order counter are committed together.

        Raises:
            NotFoundException: Customer missing or owned by another tenant
            BusinessTypeNotFound / TemplateNotFound: From pricing
        """
        customer = self.customer_repo.get_by_id_and_tenant(data.customer_id, context.tenant_id)
        if not customer:
            raise NotFoundException("Customer not found")

        request = PriceCalculationRequest(
            business_type_id=data.business_type_id,
            items=data.items,
            customer_id=customer.id,
            discount_codes=data.discount_codes,
        )
        _, calculation, _ = self.pricing.price(request)
        serialized = serialize_calculation(calculation)

        order = Order(
            tenant_id=context.tenant_id,
            customer_id=customer.id,
            user_id=context.user.id,
            business_type_id=data.business_type_id,
            order_number=self._next_order_number(context.tenant_id),
            status=OrderStatus.PENDING,
            subtotal=round2(calculation.subtotal),
            discount_total=round2(calculation.discount_total),
            surcharge_total=round2(calculation.surcharge_total),
            total_amount=round2(calculation.total),
            paid_amount=0,
            items=[
                ItemBreakdownResponse.model_validate(item).model_dump(by_alias=True, mode="json")
                for item in serialized["items"]
            ],
            notes=data.notes,
            pickup_date=data.pickup_date,
            delivery_date=data.delivery_date,
        )
        order = self.repo.create_no_commit(order)
        customer.total_orders += 1

        self.db.commit()
        self.db.refresh(order)
        logger.info("Order %s created in tenant %s", order.order_number, context.tenant_id)
        return order

    def list_orders(
        self,
        context: TenantContext,
        status: OrderStatus | None = None,
        customer_id: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> dict:
        orders, total = self.repo.get_by_tenant(
            context.tenant_filter(), status, customer_id, limit, offset
        )
        return {"orders": orders, "total": total, "limit": limit, "offset": offset}

    def get_order(self, order_id: str, context: TenantContext) -> Order:
        """
        Raises:
            NotFoundException: Order missing or owned by another tenant
        """
        order = self.repo.get_by_id_and_tenant(order_id, context.tenant_id)
        if not order:
            raise NotFoundException("Order not found")
        return order

    def update_order(self, order_id: str, data: OrderUpdate, context: TenantContext) -> Order:
        order = self.get_order(order_id, context)

        if data.status is not None:
            order.status = data.status
        if data.notes is not None:
            order.notes = data.notes
        if data.paid_amount is not None:
            order.paid_amount = round2(to_decimal(data.paid_amount))
        if data.pickup_date is not None:
            order.pickup_date = data.pickup_date
        if data.delivery_date is not None:
            order.delivery_date = data.delivery_date

        return self.repo.update(order)

    def cancel_order(self, order_id: str, context: TenantContext) -> Order:
        """Cancelled orders are kept; only the status changes"""
        order = self.get_order(order_id, context)
        order.status = OrderStatus.CANCELLED
        order = self.repo.update(order)
        logger.info("Order %s cancelled in tenant %s", order.order_number, context.tenant_id)
        return order
