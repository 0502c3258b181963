import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.apps import APP_CONFIGURATIONS
from app.core.exceptions import (
    ConflictException,
    InvalidCredentials,
    InvalidToken,
    TenantInactive,
    ValidationException,
)
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from app.models.role import UserRole
from app.models.tenant import Tenant
from app.models.user import User
from app.repositories.business_type_repository import BusinessTypeRepository
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository
from app.schemas.auth_schemas import LoginRequest, RegisterRequest
from app.schemas.tenant_schemas import RegistrationInfo, TenantSettings

logger = logging.getLogger(__name__)


def issue_tokens(user: User) -> dict[str, str]:
    return {
        "access_token": create_access_token(user),
        "refresh_token": create_refresh_token(user),
    }


class AuthService:
    """Sign up, sign in and token refresh"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.tenant_repo = TenantRepository(db)
        self.business_type_repo = BusinessTypeRepository(db)

    def register(self, data: RegisterRequest) -> dict:
        """
        Create a tenant and its first user in one commit.

        The tenant type and default settings come from the app configuration
        of `app_slug`. The first user gets role USER.

        Raises:
            ConflictException: Email or domain already in use
            ValidationException: Unknown or inactive business type ids
        """
        app_config = APP_CONFIGURATIONS[data.app_slug]

        if self.user_repo.email_exists(data.email):
            raise ConflictException("This email address is already in use")
        if data.domain and self.tenant_repo.get_by_domain(data.domain):
            raise ConflictException("This domain is already in use")

        business_types = []
        if data.business_type_ids:
            business_types = self.business_type_repo.get_active_by_ids(data.business_type_ids)
            if len(business_types) != len(set(data.business_type_ids)):
                raise ValidationException("One or more business types are invalid or inactive")

        settings = TenantSettings(
            **app_config["default_settings"],
            app_slug=data.app_slug,
            registration_info=RegistrationInfo(
                app_type=data.app_slug,
                app_name=app_config["name"],
                country=data.country,
                city=data.city,
                business_types=[{"id": bt.id, "name": bt.display_name} for bt in business_types],
            ),
        )

        tenant = self.tenant_repo.create_no_commit(
            Tenant(
                name=data.tenant_name,
                domain=data.domain,
                business_type=app_config["business_type"],
                settings=settings.model_dump(by_alias=True, exclude_none=True, mode="json"),
            )
        )
        user = self.user_repo.create_no_commit(
            User(
                tenant_id=tenant.id,
                email=data.email,
                password_hash=hash_password(data.password),
                first_name=data.first_name,
                last_name=data.last_name,
                phone=data.phone,
                role=UserRole.USER,
            )
        )
        self.db.commit()

        self.db.refresh(tenant)
        self.db.refresh(user)
        logger.info("Registered tenant %s (%s) with user %s", tenant.id, data.app_slug, user.id)

        return {
            "app": {
                "slug": data.app_slug,
                "name": app_config["name"],
                "type": app_config["business_type"],
            },
            "user": user,
            "tenant": tenant,
            "tokens": issue_tokens(user),
        }

    def login(self, data: LoginRequest) -> dict:
        """
        Raises:
            InvalidCredentials: Unknown or inactive user, or wrong password
            TenantInactive: The user's tenant is deactivated
        """
        user = self.user_repo.get_by_email(data.email, data.tenant_id)
        if not user or not user.is_active or not verify_password(data.password, user.password_hash):
            raise InvalidCredentials()

        if not user.tenant.is_active:
            raise TenantInactive()

        user.last_login_at = datetime.now(timezone.utc)
        user = self.user_repo.update(user)
        logger.info("User %s logged in to tenant %s", user.id, user.tenant_id)

        return {"user": user, "tenant": user.tenant, "tokens": issue_tokens(user)}

    def refresh(self, refresh_token: str) -> dict[str, str]:
        """
        Exchange a refresh token for a new token pair.

        Raises:
            InvalidToken / TokenExpired: Refresh token could not be verified
            InvalidToken: User missing or inactive
        """
        payload = decode_refresh_token(refresh_token)
        user = self.user_repo.get_by_id(payload["sub"])
        if not user or not user.is_active:
            raise InvalidToken("Invalid refresh token")
        return issue_tokens(user)
