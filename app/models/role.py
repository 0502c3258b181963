"""User role enum for role-based access control."""

from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    """
    User roles.

    Roles are NOT hierarchical. Every protected operation declares the
    exact set of roles it allows (see `app.dependencies.require_roles`);
    SUPER_ADMIN is only allowed where it is listed explicitly.

    - SUPER_ADMIN: platform operator, member of the system tenant
    - ADMIN: tenant administrator
    - MANAGER: store/branch manager
    - BUSINESS_OWNER: owner of the tenant's business
    - EMPLOYEE: staff member
    - USER: default role for self-registered accounts
    """

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    BUSINESS_OWNER = "BUSINESS_OWNER"
    EMPLOYEE = "EMPLOYEE"
    USER = "USER"


ALL_ROLES: tuple[UserRole, ...] = tuple(UserRole)
