from sqlalchemy.orm import Session
from app.core.exceptions import ErrorKind, ValidationException, ConflictException
from app.models.identity import Identity
from app.models.role import Role
from app.models.permission import Permission
from app.repositories.permission_repository import PermissionRepository
from app.repositories.role_repository import RoleRepository
from app.schemas.pagination import PageParams, paginate
from app.schemas.role_schemas import RoleCreate, RoleUpdate, RoleResponse


class RoleService:
    """Tenant admin management of the roles of their own tenant"""

    def __init__(self, db: Session):
        self.db = db
        self.role_repo = RoleRepository(db)
        self.permission_repo = PermissionRepository(db)

    def create_role(self, data: RoleCreate, identity: Identity) -> Role:
        """
        Raises:
            ConflictException: If the tenant already has a role with that name
            ValidationException: If a permission id is unknown
        """
        self._check_name_available(identity.tenant_id, data.name)
        permissions = self._load_permissions(data.permission_ids)

        role = Role(name=data.name, description=data.description, tenant_id=identity.tenant_id)
        self.role_repo.stage_set_permissions(role, permissions)
        return self.role_repo.create(role)

    def list_roles(self, params: PageParams, identity: Identity) -> dict:
        roles, total = self.role_repo.get_paginated(
            identity.tenant_id, limit=params.limit, offset=params.offset
        )
        return paginate(roles, total, params, RoleResponse)

    def update_role(self, role: Role, data: RoleUpdate) -> Role:
        if data.name is not None and data.name != role.name:
            self._check_name_available(role.tenant_id, data.name)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(role, field, value)
        return self.role_repo.update(role)

    def set_permissions(self, role: Role, permission_ids: list[int]) -> Role:
        """Replace the role's permission set, all or nothing"""
        permissions = self._load_permissions(permission_ids)
        self.role_repo.stage_set_permissions(role, permissions)
        return self.role_repo.update(role)

    def delete_role(self, role: Role) -> None:
        """Delete role; users holding it simply lose it"""
        self.role_repo.delete(role)

    def _check_name_available(self, tenant_id: int, name: str) -> None:
        if self.role_repo.get_by_name(tenant_id, name):
            raise ConflictException(
                f"Role '{name}' already exists in this tenant", ErrorKind.CONFLICT_ROLE_NAME
            )

    def _load_permissions(self, permission_ids: list[int]) -> list[Permission]:
        unique_ids = set(permission_ids)
        permissions = self.permission_repo.get_many(list(unique_ids))
        if len(permissions) != len(unique_ids):
            raise ValidationException(
                "One or more permissions were not found", ErrorKind.UNKNOWN_PERMISSION
            )
        return permissions
