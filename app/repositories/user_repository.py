from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from app.models.order import Order
from app.models.role import UserRole
from app.models.tenant import SYSTEM_TENANT_ID
from app.models.user import User


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: str) -> User | None:
        """Get user by ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str, tenant_id: str | None = None) -> User | None:
        """
        Get user by email (case-insensitive).

        Args:
            email: Login email
            tenant_id: Restrict the lookup to one tenant when given
        """
        query = self.db.query(User).filter(func.lower(User.email) == email.lower())
        if tenant_id:
            query = query.filter(User.tenant_id == tenant_id)
        return query.first()

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def get_active_by_tenant(
        self, tenant_filter: dict[str, str], limit: int = 20, offset: int = 0
    ) -> tuple[list[User], int]:
        """
        Active users of a tenant, ordered by first name.

        Returns:
            Tuple of (users page, total active count)
        """
        query = self.db.query(User).filter_by(**tenant_filter).filter(User.is_active.is_(True))
        total = query.count()
        users = query.order_by(User.first_name, User.id).offset(offset).limit(limit).all()
        return users, total

    def search(
        self,
        search: str | None = None,
        roles: tuple[UserRole, ...] | None = None,
        is_active: bool | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[User], int]:
        """
        Users of every customer tenant, newest first. System tenant users are excluded.

        Args:
            search: Case-insensitive substring of first name, last name or email
            roles: Restrict to these roles (None for all)
            is_active: Filter by active flag (None for all)
            limit: Page size
            offset: Number of users to skip

        Returns:
            Tuple of (users page, total matching count)
        """
        query = self.db.query(User).filter(User.tenant_id != SYSTEM_TENANT_ID)

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.email.ilike(pattern),
                )
            )
        if roles is not None:
            query = query.filter(User.role.in_(roles))
        if is_active is not None:
            query = query.filter(User.is_active == is_active)

        total = query.count()
        users = query.order_by(User.created_at.desc()).offset(offset).limit(limit).all()
        return users, total

    def count_orders(self, user_id: str) -> int:
        """Number of orders taken by a user"""
        return self.db.query(func.count(Order.id)).filter(Order.user_id == user_id).scalar()

    def create(self, user: User) -> User:
        """Create new user"""
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def create_no_commit(self, user: User) -> User:
        """Add user without committing (for atomic onboarding)"""
        self.db.add(user)
        self.db.flush()
        return user

    def update(self, user: User) -> User:
        """Update existing user"""
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.commit()
