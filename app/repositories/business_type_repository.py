from sqlalchemy.orm import Session
from app.models.business_type import BusinessType


class BusinessTypeRepository:
    """Repository for the shared business type catalog"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, business_type_id: str) -> BusinessType | None:
        return self.db.query(BusinessType).filter(BusinessType.id == business_type_id).first()

    def get_by_name(self, name: str) -> BusinessType | None:
        return self.db.query(BusinessType).filter(BusinessType.name == name).first()

    def get_all(self, is_active: bool | None = True) -> list[BusinessType]:
        """Business types ordered for display"""
        query = self.db.query(BusinessType)
        if is_active is not None:
            query = query.filter(BusinessType.is_active == is_active)
        return query.order_by(BusinessType.sort_order, BusinessType.display_name).all()

    def get_active_by_ids(self, ids: list[str]) -> list[BusinessType]:
        return (
            self.db.query(BusinessType)
            .filter(BusinessType.id.in_(ids), BusinessType.is_active.is_(True))
            .all()
        )

    def get_by_ids(self, ids: list[str]) -> list[BusinessType]:
        return self.db.query(BusinessType).filter(BusinessType.id.in_(ids)).all()

    def create(self, business_type: BusinessType) -> BusinessType:
        self.db.add(business_type)
        self.db.commit()
        self.db.refresh(business_type)
        return business_type

    def update(self, business_type: BusinessType) -> BusinessType:
        self.db.commit()
        self.db.refresh(business_type)
        return business_type

    def commit(self) -> None:
        """Commit changes made to several business types at once"""
        self.db.commit()
