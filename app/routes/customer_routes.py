from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_tenant_context, require_tenant_roles
from app.models.role import UserRole
from app.models.tenant_context import TenantContext
from app.services.customer_service import CustomerService
from app.schemas.customer_schemas import (
    CustomerCreate,
    CustomerListResponse,
    CustomerResponse,
    CustomerUpdate,
)

router = APIRouter()


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    search: str | None = Query(None),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Active customers of the current tenant, newest first"""
    service = CustomerService(db)
    return service.list_customers(context, search, limit, offset)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    data: CustomerCreate,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    service = CustomerService(db)
    return service.create_customer(data, context)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Customers of other tenants are reported as not found"""
    service = CustomerService(db)
    return service.get_customer(customer_id, context)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: str,
    data: CustomerUpdate,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    service = CustomerService(db)
    return service.update_customer(customer_id, data, context)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    context: TenantContext = Depends(
        require_tenant_roles(UserRole.ADMIN, UserRole.MANAGER, UserRole.BUSINESS_OWNER)
    ),
    db: Session = Depends(get_db),
):
    """
    Deactivate a customer.

    - **Requires ADMIN, MANAGER or BUSINESS_OWNER**
    - Orders of the customer are kept
    """
    service = CustomerService(db)
    service.delete_customer(customer_id, context)
