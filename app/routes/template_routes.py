"""
Routes for the product and service template catalogs.

Both catalogs expose the same operations, so one router is built per
template kind. Reads need an authenticated user; changes are SUPER_ADMIN only.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_roles
from app.models.role import UserRole
from app.models.template import ItemType
from app.services.template_service import TemplateService
from app.schemas.common import MessageResponse
from app.schemas.template_schemas import (
    CategoryListResponse,
    ProductTemplateCreate,
    ProductTemplateListResponse,
    ProductTemplateResponse,
    ServiceTemplateCreate,
    ServiceTemplateListResponse,
    ServiceTemplateResponse,
    TemplateReorder,
    TemplateUpdate,
)

super_admin = require_roles(UserRole.SUPER_ADMIN)


def build_template_router(item_type, create_schema, response_schema, list_schema) -> APIRouter:
    router = APIRouter()

    @router.get(
        "", response_model=list_schema, dependencies=[Depends(get_current_user)]
    )
    async def list_templates(
        business_type_id: str | None = Query(None, alias="businessTypeId"),
        category: str | None = Query(None),
        is_active: bool | None = Query(None, alias="isActive"),
        db: Session = Depends(get_db),
    ):
        """Templates ordered by sort order, newest first within the same position"""
        service = TemplateService(db, item_type)
        templates = service.list_templates(business_type_id, category, is_active)
        return {"templates": templates, "total": len(templates)}

    @router.get(
        "/categories/{business_type_id}",
        response_model=CategoryListResponse,
        dependencies=[Depends(get_current_user)],
    )
    async def list_categories(business_type_id: str, db: Session = Depends(get_db)):
        """Active template categories of a business type with template counts"""
        service = TemplateService(db, item_type)
        return service.categories(business_type_id)

    @router.post("/reorder", response_model=list_schema, dependencies=[Depends(super_admin)])
    async def reorder_templates(data: TemplateReorder, db: Session = Depends(get_db)):
        service = TemplateService(db, item_type)
        templates = service.reorder(data.business_type_id, data.template_ids)
        return {"templates": templates, "total": len(templates)}

    @router.get(
        "/{template_id}", response_model=response_schema, dependencies=[Depends(get_current_user)]
    )
    async def get_template(template_id: str, db: Session = Depends(get_db)):
        service = TemplateService(db, item_type)
        return service.get_template(template_id)

    @router.post(
        "",
        response_model=response_schema,
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(super_admin)],
    )
    async def create_template(data: create_schema, db: Session = Depends(get_db)):
        service = TemplateService(db, item_type)
        return service.create_template(data)

    @router.put(
        "/{template_id}", response_model=response_schema, dependencies=[Depends(super_admin)]
    )
    async def update_template(template_id: str, data: TemplateUpdate, db: Session = Depends(get_db)):
        service = TemplateService(db, item_type)
        return service.update_template(template_id, data)

    @router.post(
        "/{template_id}/toggle-status",
        response_model=response_schema,
        dependencies=[Depends(super_admin)],
    )
    async def toggle_template_status(template_id: str, db: Session = Depends(get_db)):
        service = TemplateService(db, item_type)
        return service.toggle_status(template_id)

    @router.delete(
        "/{template_id}", response_model=MessageResponse, dependencies=[Depends(super_admin)]
    )
    async def delete_template(template_id: str, db: Session = Depends(get_db)):
        service = TemplateService(db, item_type)
        service.delete_template(template_id)
        return {"message": "Template deleted"}

    return router


product_router = build_template_router(
    ItemType.PRODUCT, ProductTemplateCreate, ProductTemplateResponse, ProductTemplateListResponse
)
service_router = build_template_router(
    ItemType.SERVICE, ServiceTemplateCreate, ServiceTemplateResponse, ServiceTemplateListResponse
)
