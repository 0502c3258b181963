from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_tenant_context, require_roles, require_tenant_roles
from app.models.role import UserRole
from app.models.tenant_context import TenantContext
from app.services.tenant_service import TenantService
from app.schemas.tenant_schemas import (
    TenantCreate,
    TenantCreateResponse,
    TenantListResponse,
    TenantResponse,
    TenantStatusUpdate,
    TenantUpdate,
)

router = APIRouter()

super_admin = require_roles(UserRole.SUPER_ADMIN)


@router.get("/profile", response_model=TenantResponse)
async def get_current_tenant(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Get current tenant details.

    Returns tenant information for the authenticated user's tenant.
    """
    service = TenantService(db)
    return service.get_current_tenant(context)


@router.put("/profile", response_model=TenantResponse)
async def update_tenant(
    tenant_update: TenantUpdate,
    context: TenantContext = Depends(
        require_tenant_roles(UserRole.ADMIN, UserRole.BUSINESS_OWNER)
    ),
    db: Session = Depends(get_db),
):
    """
    Update the tenant's name, domain or settings.

    - **Requires ADMIN or BUSINESS_OWNER**
    - Settings are validated; unknown keys are rejected
    """
    service = TenantService(db)
    return service.update_tenant(tenant_update, context)


@router.get("", response_model=TenantListResponse, dependencies=[Depends(super_admin)])
async def list_tenants(
    search: str | None = Query(None),
    tenant_status: Literal["ALL", "ACTIVE", "INACTIVE"] = Query("ALL", alias="status"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """
    List customer tenants with owner and usage counts.

    - **Requires SUPER_ADMIN**
    - The system tenant is never listed
    """
    service = TenantService(db)
    return service.list_tenants(search, tenant_status, limit, offset)


@router.post(
    "",
    response_model=TenantCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(super_admin)],
)
async def create_tenant(data: TenantCreate, db: Session = Depends(get_db)):
    """
    Create a tenant together with its ADMIN user.

    - **Requires SUPER_ADMIN**
    """
    service = TenantService(db)
    return service.create_tenant(data)


@router.put(
    "/{tenant_id}/status", response_model=TenantResponse, dependencies=[Depends(super_admin)]
)
async def update_tenant_status(
    tenant_id: str, data: TenantStatusUpdate, db: Session = Depends(get_db)
):
    """
    Activate or deactivate a tenant.

    - **Requires SUPER_ADMIN**
    - The system tenant cannot be changed
    """
    service = TenantService(db)
    return service.set_status(tenant_id, data.is_active)
