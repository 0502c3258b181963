import logging

from sqlalchemy.orm import Session

from app.core.exceptions import (
    BusinessTypeNotFound,
    ConflictException,
    TemplateNotFound,
    ValidationException,
)
from app.models.business_type import BusinessType
from app.models.template import ItemType, TEMPLATE_MODELS
from app.repositories.business_type_repository import BusinessTypeRepository
from app.repositories.template_repository import Template, TemplateRepository
from app.schemas.template_schemas import (
    ProductTemplateCreate,
    ServiceTemplateCreate,
    TemplateAttribute,
    TemplateUpdate,
)

logger = logging.getLogger(__name__)


def _store_attributes(attributes: dict[str, TemplateAttribute]) -> dict:
    return {
        key: attribute.model_dump(by_alias=True, exclude_none=True, mode="json")
        for key, attribute in attributes.items()
    }


class TemplateService:
    """
    Service for the product and service template catalog.

    One instance manages one template kind; both kinds share the same rules
    (unique name per business type, explicit sort order).
    """

    def __init__(self, db: Session, item_type: ItemType):
        self.db = db
        self.item_type = item_type
        self.model = TEMPLATE_MODELS[item_type]
        self.repo = TemplateRepository(db, item_type)
        self.business_type_repo = BusinessTypeRepository(db)

    def _get_business_type(self, business_type_id: str) -> BusinessType:
        business_type = self.business_type_repo.get_by_id(business_type_id)
        if not business_type:
            raise BusinessTypeNotFound()
        return business_type

    def _ensure_unique_name(self, business_type_id: str, name: str, template_id: str | None = None):
        existing = self.repo.get_by_name(business_type_id, name)
        if existing and existing.id != template_id:
            raise ConflictException(
                f"A {self.item_type.value} template named '{name}' already exists for this business type"
            )

    def list_templates(
        self,
        business_type_id: str | None = None,
        category: str | None = None,
        is_active: bool | None = None,
    ) -> list[Template]:
        return self.repo.get_filtered(business_type_id, category, is_active)

    def get_template(self, template_id: str) -> Template:
        template = self.repo.get_by_id(template_id)
        if not template:
            raise TemplateNotFound()
        return template

    def create_template(self, data: ProductTemplateCreate | ServiceTemplateCreate) -> Template:
        """
        Raises:
            BusinessTypeNotFound: Unknown business type
            ConflictException: Name already used within the business type
        """
        self._get_business_type(data.business_type_id)
        self._ensure_unique_name(data.business_type_id, data.name)

        fields = data.model_dump(exclude={"attributes"})
        template = self.model(**fields, attributes=_store_attributes(data.attributes))
        template = self.repo.create(template)
        logger.info("%s template %s created", self.item_type.value.capitalize(), template.id)
        return template

    def update_template(self, template_id: str, data: TemplateUpdate) -> Template:
        template = self.get_template(template_id)

        if data.name is not None and data.name != template.name:
            self._ensure_unique_name(template.business_type_id, data.name, template.id)

        updates = data.model_dump(exclude_unset=True, exclude={"attributes"})
        # unit belongs to products and duration to services only
        updates.pop("duration" if self.item_type == ItemType.PRODUCT else "unit", None)

        for key, value in updates.items():
            if value is None:
                continue
            setattr(template, key, value)

        if data.attributes is not None:
            template.attributes = _store_attributes(data.attributes)

        return self.repo.update(template)

    def delete_template(self, template_id: str) -> None:
        template = self.get_template(template_id)
        self.repo.delete(template)
        logger.info("%s template %s deleted", self.item_type.value.capitalize(), template_id)

    def reorder(self, business_type_id: str, template_ids: list[str]) -> list[Template]:
        """
        Set each template's sort order to its index in `template_ids`.

        All ids must belong to the given business type; nothing is changed
        otherwise.

        Raises:
            BusinessTypeNotFound: Unknown business type
            ValidationException: Ids missing or owned by another business type
        """
        self._get_business_type(business_type_id)
        templates = {
            template.id: template
            for template in self.repo.get_by_ids_in_business_type(template_ids, business_type_id)
        }
        missing = [template_id for template_id in template_ids if template_id not in templates]
        if missing:
            raise ValidationException(
                f"Templates not found in this business type: {', '.join(missing)}"
            )

        for index, template_id in enumerate(template_ids):
            templates[template_id].sort_order = index
        self.repo.commit()

        return [templates[template_id] for template_id in template_ids]

    def toggle_status(self, template_id: str) -> Template:
        template = self.get_template(template_id)
        template.is_active = not template.is_active
        return self.repo.update(template)

    def categories(self, business_type_id: str) -> dict:
        """Active templates of a business type grouped by category"""
        business_type = self._get_business_type(business_type_id)
        return {
            "business_type": {
                "id": business_type.id,
                "name": business_type.name,
                "display_name": business_type.display_name,
            },
            "categories": [
                {"name": category, "count": count}
                for category, count in self.repo.count_by_category(business_type_id)
            ],
        }
