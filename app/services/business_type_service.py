import logging

from sqlalchemy.orm import Session

from app.core.exceptions import BusinessTypeNotFound, ConflictException, ValidationException
from app.models.business_type import BusinessType
from app.models.template import ItemType
from app.repositories.business_type_repository import BusinessTypeRepository
from app.repositories.template_repository import TemplateRepository
from app.schemas.business_type_schemas import (
    BusinessTypeCreate,
    BusinessTypeResponse,
    BusinessTypeUpdate,
)

logger = logging.getLogger(__name__)


class BusinessTypeService:
    """Service for the shared business type catalog"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BusinessTypeRepository(db)

    def list_active(self) -> list[BusinessType]:
        return self.repo.get_all(is_active=True)

    def list_all(self) -> list[BusinessType]:
        """Including deactivated business types (admin panel)"""
        return self.repo.get_all(is_active=None)

    def get_business_type(self, business_type_id: str) -> BusinessType:
        business_type = self.repo.get_by_id(business_type_id)
        if not business_type:
            raise BusinessTypeNotFound()
        return business_type

    def get_with_templates(self, business_type_id: str) -> dict:
        """Business type with its active product and service templates"""
        business_type = self.get_business_type(business_type_id)
        product_templates = TemplateRepository(self.db, ItemType.PRODUCT).get_filtered(
            business_type_id, is_active=True
        )
        service_templates = TemplateRepository(self.db, ItemType.SERVICE).get_filtered(
            business_type_id, is_active=True
        )
        return {
            **BusinessTypeResponse.model_validate(business_type).model_dump(),
            "product_templates": product_templates,
            "service_templates": service_templates,
        }

    def _ensure_unique_name(self, name: str, business_type_id: str | None = None):
        existing = self.repo.get_by_name(name)
        if existing and existing.id != business_type_id:
            raise ConflictException(f"Business type '{name}' already exists")

    def create_business_type(self, data: BusinessTypeCreate) -> BusinessType:
        self._ensure_unique_name(data.name)
        business_type = self.repo.create(BusinessType(**data.model_dump()))
        logger.info("Business type %s created", business_type.name)
        return business_type

    def update_business_type(self, business_type_id: str, data: BusinessTypeUpdate) -> BusinessType:
        business_type = self.get_business_type(business_type_id)

        if data.name is not None and data.name != business_type.name:
            self._ensure_unique_name(data.name, business_type.id)

        for key, value in data.model_dump(exclude_unset=True).items():
            if value is None and key in ("name", "display_name", "sort_order", "is_active"):
                continue
            setattr(business_type, key, value)

        return self.repo.update(business_type)

    def deactivate(self, business_type_id: str) -> BusinessType:
        """Soft delete: templates and rules are kept"""
        business_type = self.get_business_type(business_type_id)
        business_type.is_active = False
        business_type = self.repo.update(business_type)
        logger.info("Business type %s deactivated", business_type.name)
        return business_type

    def restore(self, business_type_id: str) -> BusinessType:
        business_type = self.get_business_type(business_type_id)
        business_type.is_active = True
        business_type = self.repo.update(business_type)
        logger.info("Business type %s restored", business_type.name)
        return business_type

    def reorder(self, business_type_ids: list[str]) -> list[BusinessType]:
        """Set each business type's sort order to its index in the list"""
        business_types = {bt.id: bt for bt in self.repo.get_by_ids(business_type_ids)}
        missing = [bt_id for bt_id in business_type_ids if bt_id not in business_types]
        if missing:
            raise ValidationException(f"Unknown business type ids: {', '.join(missing)}")

        for index, business_type_id in enumerate(business_type_ids):
            business_types[business_type_id].sort_order = index
        self.repo.commit()

        return [business_types[bt_id] for bt_id in business_type_ids]
