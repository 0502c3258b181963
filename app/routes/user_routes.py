from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_roles, require_tenant_roles
from app.models.role import UserRole
from app.models.tenant_context import TenantContext
from app.services.user_service import UserService
from app.schemas.user_schemas import (
    SystemUserCreate,
    SystemUserListResponse,
    SystemUserResponse,
    TenantUserListResponse,
    TenantUserResponse,
    UserCreate,
    UserDetailResponse,
    UserStatusUpdate,
)

router = APIRouter()

super_admin = require_roles(UserRole.SUPER_ADMIN)

RoleFilter = Literal[
    "ALL",
    "ROLE_ADMIN",
    "ROLE_USER",
    "SUPER_ADMIN",
    "ADMIN",
    "MANAGER",
    "BUSINESS_OWNER",
    "EMPLOYEE",
    "USER",
]


@router.get("", response_model=TenantUserListResponse)
async def list_users(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    context: TenantContext = Depends(
        require_tenant_roles(UserRole.ADMIN, UserRole.MANAGER, UserRole.BUSINESS_OWNER)
    ),
    db: Session = Depends(get_db),
):
    """
    Active users of the current tenant, by first name.

    - **Requires ADMIN, MANAGER or BUSINESS_OWNER**
    """
    service = UserService(db)
    return service.list_tenant_users(context, limit, offset)


@router.post("", response_model=TenantUserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    context: TenantContext = Depends(
        require_tenant_roles(UserRole.ADMIN, UserRole.BUSINESS_OWNER)
    ),
    db: Session = Depends(get_db),
):
    """
    Add a user to the current tenant.

    - **Requires ADMIN or BUSINESS_OWNER**
    - Role defaults to EMPLOYEE; SUPER_ADMIN cannot be assigned
    """
    service = UserService(db)
    return service.create_tenant_user(data, context)


@router.get("/all", response_model=SystemUserListResponse, dependencies=[Depends(super_admin)])
async def list_all_users(
    search: str | None = Query(None),
    role: RoleFilter = Query("ALL"),
    user_status: Literal["ALL", "ACTIVE", "INACTIVE"] = Query("ALL", alias="status"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """
    Users of every customer tenant, newest first.

    - **Requires SUPER_ADMIN**
    - `role` accepts a role name, ROLE_ADMIN (ADMIN and SUPER_ADMIN)
      or ROLE_USER (EMPLOYEE and MANAGER)
    """
    service = UserService(db)
    return service.list_all_users(search, role, user_status, limit, offset)


@router.post(
    "/system",
    response_model=SystemUserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(super_admin)],
)
async def create_system_user(data: SystemUserCreate, db: Session = Depends(get_db)):
    """
    Add a user to any tenant.

    - **Requires SUPER_ADMIN**
    """
    service = UserService(db)
    return service.create_system_user(data)


@router.get("/{user_id}", response_model=UserDetailResponse, dependencies=[Depends(super_admin)])
async def get_user(user_id: str, db: Session = Depends(get_db)):
    service = UserService(db)
    return service.get_user_detail(user_id)


@router.put(
    "/{user_id}/status", response_model=SystemUserResponse, dependencies=[Depends(super_admin)]
)
async def update_user_status(user_id: str, data: UserStatusUpdate, db: Session = Depends(get_db)):
    """
    Activate or deactivate a user.

    - **Requires SUPER_ADMIN**
    - SUPER_ADMIN users cannot be changed
    """
    service = UserService(db)
    return service.set_status(user_id, data.is_active)


@router.delete(
    "/{user_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(super_admin)]
)
async def delete_user(user_id: str, db: Session = Depends(get_db)):
    """
    Delete a user permanently.

    - **Requires SUPER_ADMIN**
    - SUPER_ADMIN users and users with orders cannot be deleted
    """
    service = UserService(db)
    service.delete_user(user_id)
