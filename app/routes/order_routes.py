from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_tenant_context, require_tenant_roles
from app.models.order import OrderStatus
from app.models.role import UserRole
from app.models.tenant_context import TenantContext
from app.services.order_service import OrderService
from app.schemas.order_schemas import (
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    OrderUpdate,
)

router = APIRouter()


@router.get("", response_model=OrderListResponse)
async def list_orders(
    order_status: OrderStatus | None = Query(None, alias="status"),
    customer_id: str | None = Query(None, alias="customerId"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Orders of the current tenant, newest first"""
    service = OrderService(db)
    return service.list_orders(context, order_status, customer_id, limit, offset)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    data: OrderCreate,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Create an order.

    The items are priced with the business type's active rules at creation
    time and the totals are stored with the order.
    """
    service = OrderService(db)
    return service.create_order(data, context)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    service = OrderService(db)
    return service.get_order(order_id, context)


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: str,
    data: OrderUpdate,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Update status, notes, paid amount or dates; priced amounts never change"""
    service = OrderService(db)
    return service.update_order(order_id, data, context)


@router.delete("/{order_id}", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    context: TenantContext = Depends(require_tenant_roles(UserRole.ADMIN, UserRole.MANAGER)),
    db: Session = Depends(get_db),
):
    """
    Cancel an order.

    - **Requires ADMIN or MANAGER**
    - The order is kept with status CANCELLED
    """
    service = OrderService(db)
    return service.cancel_order(order_id, context)
