class ServiceBusinessException(Exception):
    """
    Base exception for the service business API.

    Each subclass carries the HTTP status and the stable error code clients
    branch on. `detail` is an optional request-specific message.
    """

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.code)
        self.detail = detail


class UnauthorizedException(ServiceBusinessException):
    """Raised when the caller could not be authenticated"""

    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenException(ServiceBusinessException):
    """Raised when the caller may not perform the operation"""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundException(ServiceBusinessException):
    """Raised when resource not found"""

    status_code = 404
    code = "NOT_FOUND"


class ValidationException(ServiceBusinessException):
    """Raised for business logic validation errors"""

    status_code = 400
    code = "VALIDATION_ERROR"


class ConflictException(ServiceBusinessException):
    """Raised when a uniqueness rule would be violated"""

    status_code = 409
    code = "CONFLICT"


# Tenant resolution


class TenantRequired(ValidationException):
    code = "TENANT_REQUIRED"


# Authentication


class TokenRequired(UnauthorizedException):
    code = "TOKEN_REQUIRED"


class InvalidToken(UnauthorizedException):
    code = "INVALID_TOKEN"


class TokenExpired(UnauthorizedException):
    code = "TOKEN_EXPIRED"


class UserNotFound(UnauthorizedException):
    code = "USER_NOT_FOUND"


class InvalidCredentials(UnauthorizedException):
    code = "INVALID_CREDENTIALS"


class AuthRequired(UnauthorizedException):
    code = "AUTH_REQUIRED"


# Authorization


class TenantInactive(ForbiddenException):
    code = "TENANT_INACTIVE"


class InsufficientPermissions(ForbiddenException):
    code = "INSUFFICIENT_PERMISSIONS"


# Catalog and pricing


class TemplateNotFound(NotFoundException):
    code = "TEMPLATE_NOT_FOUND"


class BusinessTypeNotFound(NotFoundException):
    code = "BUSINESS_TYPE_NOT_FOUND"


class DuplicateRuleName(ConflictException):
    code = "DUPLICATE_RULE_NAME"
