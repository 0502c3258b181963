from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.template import ItemType, ProductTemplate, ServiceTemplate, TEMPLATE_MODELS

Template = ProductTemplate | ServiceTemplate


class TemplateRepository:
    """
    Repository for product and service templates.

    One instance works on a single template kind, selected by `item_type`.
    """

    def __init__(self, db: Session, item_type: ItemType):
        self.db = db
        self.model = TEMPLATE_MODELS[item_type]

    def get_by_id(self, template_id: str) -> Template | None:
        return self.db.query(self.model).filter(self.model.id == template_id).first()

    def get_in_business_type(self, template_id: str, business_type_id: str) -> Template | None:
        """
        Get template ensuring it belongs to the business type.

        Returns None if template doesn't exist or belongs to another business type.
        """
        return (
            self.db.query(self.model)
            .filter(self.model.id == template_id, self.model.business_type_id == business_type_id)
            .first()
        )

    def get_by_name(self, business_type_id: str, name: str) -> Template | None:
        return (
            self.db.query(self.model)
            .filter(self.model.business_type_id == business_type_id, self.model.name == name)
            .first()
        )

    def get_filtered(
        self,
        business_type_id: str | None = None,
        category: str | None = None,
        is_active: bool | None = None,
    ) -> list[Template]:
        """Templates ordered by sort order, newest first within the same position"""
        query = self.db.query(self.model)
        if business_type_id:
            query = query.filter(self.model.business_type_id == business_type_id)
        if category:
            query = query.filter(self.model.category == category)
        if is_active is not None:
            query = query.filter(self.model.is_active == is_active)
        return query.order_by(self.model.sort_order, self.model.created_at.desc()).all()

    def get_by_ids_in_business_type(self, ids: list[str], business_type_id: str) -> list[Template]:
        return (
            self.db.query(self.model)
            .filter(self.model.id.in_(ids), self.model.business_type_id == business_type_id)
            .all()
        )

    def count_by_category(self, business_type_id: str) -> list[tuple[str, int]]:
        """Active template counts grouped by category"""
        return (
            self.db.query(self.model.category, func.count(self.model.id))
            .filter(self.model.business_type_id == business_type_id, self.model.is_active.is_(True))
            .group_by(self.model.category)
            .order_by(self.model.category)
            .all()
        )

    def create(self, template: Template) -> Template:
        self.db.add(template)
        self.db.commit()
        self.db.refresh(template)
        return template

    def update(self, template: Template) -> Template:
        self.db.commit()
        self.db.refresh(template)
        return template

    def delete(self, template: Template) -> None:
        self.db.delete(template)
        self.db.commit()

    def commit(self) -> None:
        """Commit a batch of changes made by the caller"""
        self.db.commit()
