from sqlalchemy.orm import Session
from app.core.exceptions import ErrorKind, NotFoundException, ValidationException
from app.core.security import hash_password
from app.models.identity import Identity
from app.models.user import User
from app.repositories.role_repository import RoleRepository
from app.repositories.user_repository import UserRepository
from app.schemas.pagination import PageParams, paginate
from app.schemas.tenant_user_schemas import TenantUserCreate, TenantUserUpdate, ProfileUpdate
from app.schemas.user_schemas import PasswordUpdate, UserResponse
from app.services.user_service import UserService, check_password_change


class TenantUserService:
    """
    User management inside the caller's own tenant.

    Every lookup is filtered by the tenant taken from the resolved
    identity, never from request input.
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.role_repo = RoleRepository(db)
        self.user_service = UserService(db)

    def create_user(self, data: TenantUserCreate, identity: Identity) -> User:
        """
        Create a regular member of the caller's tenant.

        Raises:
            ConflictException: If email already used
            ValidationException: If a role does not belong to the tenant
        """
        self.user_service.check_email_available(data.email)

        roles = []
        if data.role_ids:
            unique_ids = set(data.role_ids)
            roles = self.role_repo.get_many_in_tenant(list(unique_ids), identity.tenant_id)
            if len(roles) != len(unique_ids):
                raise ValidationException(
                    "One or more roles do not belong to your tenant", ErrorKind.FOREIGN_ROLE
                )

        user = User(
            email=data.email,
            name=data.name,
            password=hash_password(data.password),
            tenant_id=identity.tenant_id,
            is_super_admin=False,
            is_tenant_admin=False,
            is_active=data.is_active,
        )
        self.user_repo.stage_add_roles(user, roles)
        return self.user_repo.create(user)

    def list_users(self, params: PageParams, identity: Identity) -> dict:
        users, total = self.user_repo.get_paginated(
            limit=params.limit, offset=params.offset, tenant_id=identity.tenant_id
        )
        return paginate(users, total, params, UserResponse)

    def get_user(self, user_id: int, identity: Identity) -> User:
        """
        Get a user of the caller's tenant.

        Raises:
            NotFoundException: If user not found or belongs to another tenant
        """
        user = self.user_repo.get_by_id_and_tenant(user_id, identity.tenant_id)
        if not user:
            raise NotFoundException("User not found")
        return user

    def update_user(self, user: User, data: TenantUserUpdate) -> User:
        """Update email, name or active flag of a tenant member"""
        return self._apply(user, data.model_dump(exclude_unset=True))

    def toggle_active(self, user: User) -> User:
        user.is_active = not user.is_active
        return self.user_repo.update(user)

    def get_profile(self, identity: Identity) -> User:
        return self.get_user(identity.id, identity)

    def update_profile(self, identity: Identity, data: ProfileUpdate) -> User:
        user = self.get_profile(identity)
        return self._apply(user, data.model_dump(exclude_unset=True))

    def update_password(self, identity: Identity, data: PasswordUpdate) -> User:
        """
        Change the caller's own password.

        Raises:
            ValidationException: If confirmation differs or current password is wrong
        """
        user = self.get_profile(identity)
        check_password_change(user, data)
        user.password = hash_password(data.new_password)
        return self.user_repo.update(user)

    def _apply(self, user: User, changes: dict) -> User:
        if changes.get("email") is not None:
            self.user_service.check_email_available(changes["email"], exclude_id=user.id)
        for field, value in changes.items():
            if value is not None:
                setattr(user, field, value)
        return self.user_repo.update(user)
