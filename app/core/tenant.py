"""Tenant resolution for incoming requests."""

import logging
from dataclasses import dataclass

from fastapi import Request

from app.config import settings
from app.core.exceptions import TenantRequired, UnauthorizedException
from app.core.security import decode_access_token

logger = logging.getLogger(__name__)

SOURCE_HEADER = "header"
SOURCE_TOKEN = "token"


@dataclass(frozen=True)
class TenantScope:
    """Tenant id resolved for a request, before authentication."""

    tenant_id: str | None
    source: str | None = None

    def tenant_filter(self) -> dict[str, str]:
        return {"tenant_id": self.tenant_id}


def is_public_path(path: str) -> bool:
    """Public paths are matched by substring, so prefixes and versions don't matter."""
    return any(public in path for public in settings.public_paths_list)


def _bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def resolve_tenant_id(request: Request) -> TenantScope:
    """
    Resolve the tenant of a request.

    Order:
    1. Tenant header (X-Tenant-ID by default)
    2. `tenant_id` claim of the bearer access token

    A bad token is only logged here; authentication rejects it later.
    """
    header_value = request.headers.get(settings.TENANT_HEADER)
    if header_value:
        return TenantScope(tenant_id=header_value.strip(), source=SOURCE_HEADER)

    token = _bearer_token(request)
    if token:
        try:
            payload = decode_access_token(token)
        except UnauthorizedException as e:
            logger.warning("Could not read tenant from token: %s", e.code)
        else:
            tenant_id = payload.get("tenant_id")
            if tenant_id:
                return TenantScope(tenant_id=tenant_id, source=SOURCE_TOKEN)

    return TenantScope(tenant_id=None)


async def get_tenant_scope(request: Request) -> TenantScope:
    """
    FastAPI dependency enforcing that a tenant can be resolved.

    Raises:
        TenantRequired: If no tenant id is found and the path is not public
    """
    scope = resolve_tenant_id(request)
    if scope.tenant_id is None and not is_public_path(request.url.path):
        raise TenantRequired()
    return scope
