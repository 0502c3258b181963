from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.models.customer import Customer


class CustomerRepository:
    """Repository for Customer model operations with multi-tenant support"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_tenant(
        self,
        tenant_filter: dict[str, str],
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Customer], int]:
        """
        Active customers of a tenant, newest first.

        Args:
            tenant_filter: Tenant filter clause from the request context
            search: Matches name, phone or email (case-insensitive)
            limit: Page size
            offset: Number of customers to skip

        Returns:
            Tuple of (customers page, total matching count)
        """
        query = (
            self.db.query(Customer)
            .filter_by(**tenant_filter)
            .filter(Customer.is_active.is_(True))
        )
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Customer.name.ilike(pattern),
                    Customer.phone.ilike(pattern),
                    Customer.email.ilike(pattern),
                )
            )
        total = query.count()
        customers = query.order_by(Customer.created_at.desc()).offset(offset).limit(limit).all()
        return customers, total

    def get_by_id_and_tenant(self, customer_id: str, tenant_id: str) -> Customer | None:
        """
        Get an active customer ensuring it belongs to tenant (multi-tenant safety).

        Returns None if customer doesn't exist, was deleted or belongs to
        another tenant.
        """
        return (
            self.db.query(Customer)
            .filter(
                Customer.id == customer_id,
                Customer.tenant_id == tenant_id,
                Customer.is_active.is_(True),
            )
            .first()
        )

    def get_by_phone(self, tenant_id: str, phone: str) -> Customer | None:
        return (
            self.db.query(Customer)
            .filter(Customer.tenant_id == tenant_id, Customer.phone == phone)
            .first()
        )

    def create(self, customer: Customer) -> Customer:
        """Create new customer"""
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def update(self, customer: Customer) -> Customer:
        """Update existing customer"""
        self.db.commit()
        self.db.refresh(customer)
        return customer
