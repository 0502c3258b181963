import logging

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException, NotFoundException
from app.models.customer import Customer
from app.models.tenant_context import TenantContext
from app.repositories.customer_repository import CustomerRepository
from app.schemas.customer_schemas import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)


class CustomerService:
    """Service for customer business logic, always scoped to the caller's tenant"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository(db)

    def _ensure_unique_phone(self, context: TenantContext, phone: str, customer_id: str | None = None):
        existing = self.repo.get_by_phone(context.tenant_id, phone)
        if existing and existing.id != customer_id:
            raise ConflictException("A customer with this phone number already exists")

    def list_customers(
        self, context: TenantContext, search: str | None = None, limit: int = 50, offset: int = 0
    ) -> dict:
        customers, total = self.repo.get_by_tenant(context.tenant_filter(), search, limit, offset)
        return {"customers": customers, "total": total, "limit": limit, "offset": offset}

    def get_customer(self, customer_id: str, context: TenantContext) -> Customer:
        """
        Get a customer of the caller's tenant.

        Raises:
            NotFoundException: Customer missing, deleted or owned by another tenant
        """
        customer = self.repo.get_by_id_and_tenant(customer_id, context.tenant_id)
        if not customer:
            raise NotFoundException("Customer not found")
        return customer

    def create_customer(self, data: CustomerCreate, context: TenantContext) -> Customer:
        """
        Raises:
            ConflictException: Phone number already registered in this tenant
        """
        self._ensure_unique_phone(context, data.phone)
        customer = Customer(tenant_id=context.tenant_id, **data.model_dump())
        customer = self.repo.create(customer)
        logger.info("Customer %s created in tenant %s", customer.id, context.tenant_id)
        return customer

    def update_customer(self, customer_id: str, data: CustomerUpdate, context: TenantContext) -> Customer:
        customer = self.get_customer(customer_id, context)

        if data.phone is not None and data.phone != customer.phone:
            self._ensure_unique_phone(context, data.phone, customer.id)

        for key, value in data.model_dump(exclude_unset=True).items():
            if value is None and key in ("name", "phone", "address"):
                continue
            setattr(customer, key, value)

        return self.repo.update(customer)

    def delete_customer(self, customer_id: str, context: TenantContext) -> None:
        """Soft delete: the customer stays for its orders but leaves the list"""
        customer = self.get_customer(customer_id, context)
        customer.is_active = False
        self.repo.update(customer)
        logger.info("Customer %s deactivated in tenant %s", customer_id, context.tenant_id)
