from enum import Enum as PyEnum


class ErrorKind(str, PyEnum):
    """Stable machine-readable error codes returned with every error response"""

    # Authentication
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    USER_NOT_FOUND = "user_not_found"
    NOT_AUTHENTICATED = "not_authenticated"

    # Authorization
    ACCOUNT_DISABLED = "account_disabled"
    TENANT_DISABLED = "tenant_disabled"
    ADMIN_ONLY = "admin_only"
    TENANT_ADMIN_ONLY = "tenant_admin_only"
    NO_TENANT = "no_tenant"
    SUPER_ADMINS_EXCLUDED = "super_admins_excluded"
    CROSS_TENANT_ACCESS = "cross_tenant_access"  # never sent to clients
    RESOURCE_NOT_FOUND = "resource_not_found"

    # Uniqueness
    CONFLICT_SLUG = "conflict_slug"
    CONFLICT_DOCUMENT = "conflict_document"
    CONFLICT_EMAIL = "conflict_email"
    CONFLICT_ROLE_NAME = "conflict_role_name"

    # Business rules
    FOREIGN_ROLE = "foreign_role"
    UNKNOWN_PERMISSION = "unknown_permission"
    SUPER_ADMIN_NO_ROLES_NEEDED = "super_admin_no_roles_needed"
    PASSWORD_MISMATCH = "password_mismatch"
    WRONG_CURRENT_PASSWORD = "wrong_current_password"
    INVALID_TENANT_SCOPE = "invalid_tenant_scope"
    SUPER_ADMIN_CREATION_FORBIDDEN = "super_admin_creation_forbidden"
    SUPER_ADMIN_FLAG_IMMUTABLE = "super_admin_flag_immutable"


class TenantAdminException(Exception):
    """Base exception for the tenant admin API"""

    default_kind: ErrorKind = ErrorKind.RESOURCE_NOT_FOUND

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.kind = kind or self.default_kind


class UnauthorizedException(TenantAdminException):
    """Raised when credentials or the bearer token cannot be verified"""

    default_kind = ErrorKind.INVALID_TOKEN


class NotFoundException(TenantAdminException):
    """Raised when resource not found (or lives in another tenant)"""

    default_kind = ErrorKind.RESOURCE_NOT_FOUND


class ForbiddenException(TenantAdminException):
    """Raised when an authorization gate denies the request"""

    default_kind = ErrorKind.ADMIN_ONLY


class ValidationException(TenantAdminException):
    """Raised for business logic validation errors"""

    default_kind = ErrorKind.INVALID_TENANT_SCOPE


class ConflictException(TenantAdminException):
    """Raised when a unique field is already taken"""

    default_kind = ErrorKind.CONFLICT_EMAIL
