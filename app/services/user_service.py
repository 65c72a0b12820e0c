import logging
from sqlalchemy.orm import Session
from app.core.authorization import EffectivePermissions, resolve_effective_permissions
from app.core.exceptions import (
    ErrorKind,
    NotFoundException,
    ValidationException,
    ConflictException,
)
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.repositories.permission_repository import PermissionRepository
from app.repositories.role_repository import RoleRepository
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository
from app.schemas.pagination import PageParams, paginate
from app.schemas.user_schemas import UserCreate, UserUpdate, PasswordUpdate, UserResponse

logger = logging.getLogger(__name__)


def check_tenant_scope(is_super_admin: bool, is_tenant_admin: bool, tenant_id: int | None) -> None:
    """
    Enforce the tenancy invariants on the state a write would produce.

    Raises:
        ValidationException: super admin with a tenant, or tenant admin without one
    """
    if is_super_admin and tenant_id is not None:
        raise ValidationException(
            "A super admin cannot belong to a tenant", ErrorKind.INVALID_TENANT_SCOPE
        )
    if is_tenant_admin and tenant_id is None:
        raise ValidationException(
            "A tenant admin must belong to a tenant", ErrorKind.INVALID_TENANT_SCOPE
        )


def check_password_change(user: User, data: PasswordUpdate) -> None:
    """
    Validate a password change request against the stored hash.

    Raises:
        ValidationException: confirmation mismatch or wrong current password
    """
    if data.new_password != data.new_password_confirm:
        raise ValidationException("Passwords do not match", ErrorKind.PASSWORD_MISMATCH)
    if not verify_password(data.current_password, user.password):
        raise ValidationException(
            "Current password is incorrect", ErrorKind.WRONG_CURRENT_PASSWORD
        )


class UserService:
    """Global user management business logic (Super Admin only)"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.tenant_repo = TenantRepository(db)
        self.role_repo = RoleRepository(db)
        self.permission_repo = PermissionRepository(db)

    def create_user(self, data: UserCreate) -> User:
        """
        Create a user in any tenant (or none).

        Super admins cannot be created through the API; they come from
        the seed script only.

        Raises:
            ConflictException: If email already used
            ValidationException: If tenancy invariants fail or super admin requested
            NotFoundException: If tenant_id does not exist
        """
        self.check_email_available(data.email)
        check_tenant_scope(data.is_super_admin, data.is_tenant_admin, data.tenant_id)

        if data.is_super_admin:
            raise ValidationException(
                "Super admins cannot be created through the API. Use the seed command.",
                ErrorKind.SUPER_ADMIN_CREATION_FORBIDDEN,
            )

        if data.tenant_id is not None:
            self._get_tenant(data.tenant_id)

        user = User(
            email=data.email,
            name=data.name,
            password=hash_password(data.password),
            tenant_id=data.tenant_id,
            is_super_admin=False,
            is_tenant_admin=data.is_tenant_admin,
            is_active=data.is_active,
        )
        return self.user_repo.create(user)

    def list_users(self, params: PageParams, tenant_id: int | None = None) -> dict:
        """Get one page of users, optionally restricted to a tenant"""
        users, total = self.user_repo.get_paginated(
            limit=params.limit, offset=params.offset, tenant_id=tenant_id
        )
        return paginate(users, total, params, UserResponse)

    def list_users_by_tenant(self, tenant_id: int, params: PageParams) -> dict:
        """
        Raises:
            NotFoundException: If tenant not found
        """
        self._get_tenant(tenant_id)
        return self.list_users(params, tenant_id=tenant_id)

    def get_user(self, user_id: int) -> User:
        """
        Raises:
            NotFoundException: If user not found
        """
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundException(f"User with ID {user_id} not found")
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        """
        Update a user.

        The super admin flag is immutable here. Moving a user to another
        tenant clears all their roles and direct permissions in the same
        commit as the move, since both are scoped to the old tenant.

        Raises:
            ConflictException: If new email already used
            ValidationException: If invariants fail or super admin flag changes
            NotFoundException: If user or target tenant not found
        """
        user = self.get_user(user_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("email") is not None:
            self.check_email_available(changes["email"], exclude_id=user.id)

        if "is_super_admin" in changes and changes["is_super_admin"] != user.is_super_admin:
            raise ValidationException(
                "The super admin flag cannot be changed",
                ErrorKind.SUPER_ADMIN_FLAG_IMMUTABLE,
            )
        changes.pop("is_super_admin", None)

        new_tenant_id = changes.get("tenant_id", user.tenant_id)
        new_is_tenant_admin = changes.get("is_tenant_admin")
        if new_is_tenant_admin is None:
            new_is_tenant_admin = user.is_tenant_admin
        check_tenant_scope(user.is_super_admin, new_is_tenant_admin, new_tenant_id)

        tenant_changed = "tenant_id" in changes and new_tenant_id != user.tenant_id
        if tenant_changed:
            if new_tenant_id is not None:
                self._get_tenant(new_tenant_id)
            self.user_repo.stage_clear_links(user)
            logger.warning(
                "User moved between tenants, links cleared: user_id=%s from=%s to=%s",
                user.id,
                user.tenant_id,
                new_tenant_id,
            )

        for field, value in changes.items():
            if value is None and field != "tenant_id":
                continue
            setattr(user, field, value)

        return self.user_repo.update(user)

    def update_password(self, user_id: int, data: PasswordUpdate) -> User:
        """
        Raises:
            ValidationException: If confirmation differs or current password is wrong
        """
        user = self.get_user(user_id)
        check_password_change(user, data)
        user.password = hash_password(data.new_password)
        return self.user_repo.update(user)

    def delete_user(self, user_id: int) -> None:
        user = self.get_user(user_id)
        self.user_repo.delete(user)
        logger.info("User deleted: user_id=%s", user_id)

    def toggle_active(self, user_id: int) -> User:
        user = self.get_user(user_id)
        user.is_active = not user.is_active
        return self.user_repo.update(user)

    def assign_roles(self, user_id: int, role_ids: list[int]) -> User:
        """
        Grant roles to a user, all or nothing.

        Every role must exist and belong to the user's tenant; a single
        miss rejects the whole batch before anything is written.

        Raises:
            ValidationException: Super admin target, or unknown/foreign role
        """
        user = self.get_user(user_id)
        self._reject_super_admin_grant(user, "roles")

        unique_ids = set(role_ids)
        roles = self.role_repo.get_many_in_tenant(list(unique_ids), user.tenant_id)
        if len(roles) != len(unique_ids):
            raise ValidationException(
                "One or more roles were not found or do not belong to the user's tenant",
                ErrorKind.FOREIGN_ROLE,
            )

        self.user_repo.stage_add_roles(user, roles)
        return self.user_repo.update(user)

    def remove_roles(self, user_id: int, role_ids: list[int]) -> User:
        user = self.get_user(user_id)
        self.user_repo.stage_remove_roles(user, role_ids)
        return self.user_repo.update(user)

    def assign_permissions(self, user_id: int, permission_ids: list[int]) -> User:
        """
        Grant permissions directly to a user, all or nothing.

        Raises:
            ValidationException: Super admin target, or unknown permission
        """
        user = self.get_user(user_id)
        self._reject_super_admin_grant(user, "permissions")

        unique_ids = set(permission_ids)
        permissions = self.permission_repo.get_many(list(unique_ids))
        if len(permissions) != len(unique_ids):
            raise ValidationException(
                "One or more permissions were not found", ErrorKind.UNKNOWN_PERMISSION
            )

        self.user_repo.stage_add_permissions(user, permissions)
        return self.user_repo.update(user)

    def remove_permissions(self, user_id: int, permission_ids: list[int]) -> User:
        user = self.get_user(user_id)
        self.user_repo.stage_remove_permissions(user, permission_ids)
        return self.user_repo.update(user)

    def get_effective_permissions(self, user_id: int) -> EffectivePermissions:
        """Role-derived plus direct permissions, or the unrestricted sentinel"""
        user = self.get_user(user_id)
        return resolve_effective_permissions(user)

    def check_email_available(self, email: str, exclude_id: int | None = None) -> None:
        """
        Raises:
            ConflictException: If another user already uses the email
        """
        existing = self.user_repo.get_by_email(email)
        if existing and existing.id != exclude_id:
            raise ConflictException("Email is already in use", ErrorKind.CONFLICT_EMAIL)

    def _get_tenant(self, tenant_id: int):
        tenant = self.tenant_repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundException(f"Tenant with ID {tenant_id} not found")
        return tenant

    def _reject_super_admin_grant(self, user: User, what: str) -> None:
        if user.is_super_admin:
            raise ValidationException(
                f"Super admins have full access and do not need {what}",
                ErrorKind.SUPER_ADMIN_NO_ROLES_NEEDED,
            )
