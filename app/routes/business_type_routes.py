from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_roles
from app.models.role import UserRole
from app.services.business_type_service import BusinessTypeService
from app.schemas.business_type_schemas import (
    BusinessTypeCreate,
    BusinessTypeDetailResponse,
    BusinessTypeListResponse,
    BusinessTypeReorder,
    BusinessTypeResponse,
    BusinessTypeUpdate,
)

router = APIRouter()

super_admin = require_roles(UserRole.SUPER_ADMIN)


@router.get("", response_model=BusinessTypeListResponse)
async def list_business_types(db: Session = Depends(get_db)):
    """Active business types, for sign up and catalog browsing (public)"""
    service = BusinessTypeService(db)
    business_types = service.list_active()
    return BusinessTypeListResponse(business_types=business_types, total=len(business_types))


@router.get(
    "/admin/all",
    response_model=BusinessTypeListResponse,
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN, UserRole.ADMIN))],
)
async def list_all_business_types(db: Session = Depends(get_db)):
    """All business types including deactivated ones"""
    service = BusinessTypeService(db)
    business_types = service.list_all()
    return BusinessTypeListResponse(business_types=business_types, total=len(business_types))


@router.post(
    "/reorder", response_model=BusinessTypeListResponse, dependencies=[Depends(super_admin)]
)
async def reorder_business_types(data: BusinessTypeReorder, db: Session = Depends(get_db)):
    """Set the display order; each id's sort order becomes its list position"""
    service = BusinessTypeService(db)
    business_types = service.reorder(data.business_type_ids)
    return BusinessTypeListResponse(business_types=business_types, total=len(business_types))


@router.get("/{business_type_id}", response_model=BusinessTypeDetailResponse)
async def get_business_type(business_type_id: str, db: Session = Depends(get_db)):
    """Business type with its active product and service templates (public)"""
    service = BusinessTypeService(db)
    return service.get_with_templates(business_type_id)


@router.post(
    "",
    response_model=BusinessTypeResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(super_admin)],
)
async def create_business_type(data: BusinessTypeCreate, db: Session = Depends(get_db)):
    service = BusinessTypeService(db)
    return service.create_business_type(data)


@router.put(
    "/{business_type_id}", response_model=BusinessTypeResponse, dependencies=[Depends(super_admin)]
)
async def update_business_type(
    business_type_id: str, data: BusinessTypeUpdate, db: Session = Depends(get_db)
):
    service = BusinessTypeService(db)
    return service.update_business_type(business_type_id, data)


@router.delete(
    "/{business_type_id}", response_model=BusinessTypeResponse, dependencies=[Depends(super_admin)]
)
async def delete_business_type(business_type_id: str, db: Session = Depends(get_db)):
    """
    Deactivate a business type.

    Templates and pricing rules are kept so the business type can be restored.
    """
    service = BusinessTypeService(db)
    return service.deactivate(business_type_id)


@router.post(
    "/{business_type_id}/restore",
    response_model=BusinessTypeResponse,
    dependencies=[Depends(super_admin)],
)
async def restore_business_type(business_type_id: str, db: Session = Depends(get_db)):
    service = BusinessTypeService(db)
    return service.restore(business_type_id)
