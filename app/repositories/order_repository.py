from sqlalchemy.orm import Session

from app.models.order import Order, OrderStatus


class OrderRepository:
    """Repository for Order data access"""

    def __init__(self, db: Session):
        self.db = db

    def create_no_commit(self, order: Order) -> Order:
        """Create order without committing (for atomic ops)"""
        self.db.add(order)
        self.db.flush()
        return order

    def get_by_id_and_tenant(self, order_id: str, tenant_id: str) -> Order | None:
        """
        Get order by ID, ensuring it belongs to the tenant.

        Returns:
            Order object or None if not found or belongs to different tenant
        """
        return (
            self.db.query(Order)
            .filter(Order.id == order_id, Order.tenant_id == tenant_id)
            .first()
        )

    def get_by_tenant(
        self,
        tenant_filter: dict[str, str],
        status: OrderStatus | None = None,
        customer_id: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Order], int]:
        """Orders of a tenant with optional filters, newest first"""
        query = self.db.query(Order).filter_by(**tenant_filter)
        if status:
            query = query.filter(Order.status == status)
        if customer_id:
            query = query.filter(Order.customer_id == customer_id)

        total = query.count()
        orders = query.order_by(Order.created_at.desc()).offset(offset).limit(limit).all()
        return orders, total

    def get_last_number_with_prefix(self, tenant_id: str, prefix: str) -> str | None:
        """Highest order number of a tenant starting with the given date prefix"""
        order = (
            self.db.query(Order)
            .filter(Order.tenant_id == tenant_id, Order.order_number.like(f"{prefix}%"))
            .order_by(Order.order_number.desc())
            .first()
        )
        return order.order_number if order else None

    def update(self, order: Order) -> Order:
        """Update existing order"""
        self.db.commit()
        self.db.refresh(order)
        return order
