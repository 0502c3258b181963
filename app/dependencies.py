import logging
from typing import Callable, Iterable

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.security import decode_access_token
from app.core.tenant import TenantScope, get_tenant_scope
from app.core.exceptions import (
    AuthRequired,
    InsufficientPermissions,
    TenantInactive,
    TokenRequired,
    UserNotFound,
)
from app.database import get_db
from app.repositories.user_repository import UserRepository
from app.models.role import UserRole
from app.models.tenant_context import TenantContext
from app.models.user import User

logger = logging.getLogger(__name__)

# Missing credentials are reported as TOKEN_REQUIRED rather than FastAPI's default 403
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency to validate the JWT and load the acting user.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate signature, expiry and claims using SECRET_KEY
    3. Load the user from the 'sub' claim
    4. Reject inactive users and users of deactivated tenants

    Raises:
        TokenRequired: No bearer token was sent
        InvalidToken / TokenExpired: Token could not be verified
        UserNotFound: User missing or inactive
        TenantInactive: The user's tenant is deactivated
    """
    if credentials is None:
        raise TokenRequired()

    payload = decode_access_token(credentials.credentials)

    user = UserRepository(db).get_by_id(payload["sub"])
    if not user or not user.is_active:
        raise UserNotFound()

    if not user.tenant.is_active:
        raise TenantInactive()

    return user


def authorize(user: User | None, allowed_roles: Iterable[UserRole]) -> User:
    """
    Check a user against an explicit role allow-list.

    Roles are not hierarchical; SUPER_ADMIN must be listed to be allowed.

    Raises:
        AuthRequired: There is no authenticated user
        InsufficientPermissions: The user's role is not in the allow-list
    """
    if user is None:
        raise AuthRequired()

    allowed = tuple(allowed_roles)
    if user.role not in allowed:
        logger.warning(
            "Permission denied for user %s: role %s not in %s",
            user.id,
            user.role.value,
            [role.value for role in allowed],
        )
        raise InsufficientPermissions()

    return user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """
    Dependency factory for role-gated endpoints.

    Usage:
        @router.post("/rules")
        def create_rule(user: User = Depends(require_roles(UserRole.SUPER_ADMIN))):
            ...
    """

    def dependency(user: User = Depends(get_current_user)) -> User:
        return authorize(user, roles)

    return dependency


async def get_tenant_context(
    scope: TenantScope = Depends(get_tenant_scope),
    user: User = Depends(get_current_user),
) -> TenantContext:
    """
    FastAPI dependency for tenant-scoped endpoints.

    Tenant resolution runs before authentication, so a request carrying
    neither a tenant header nor a token fails with TENANT_REQUIRED.
    Once authenticated, the user's own tenant is the effective tenant.
    """
    if scope.tenant_id and scope.tenant_id != user.tenant_id:
        logger.warning(
            "Ignoring tenant %s from %s for user %s of tenant %s",
            scope.tenant_id,
            scope.source,
            user.id,
            user.tenant_id,
        )
    return TenantContext(tenant_id=user.tenant_id, user=user)


def require_tenant_roles(*roles: UserRole) -> Callable[..., TenantContext]:
    """Dependency factory for role-gated tenant-scoped endpoints."""

    def dependency(context: TenantContext = Depends(get_tenant_context)) -> TenantContext:
        authorize(context.user, roles)
        return context

    return dependency
