from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundException
from app.models.permission import Permission
from app.repositories.permission_repository import PermissionRepository
from app.schemas.pagination import PageParams, paginate
from app.schemas.permission_schemas import PermissionResponse


class PermissionService:
    """Read-only access to the permission catalog"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PermissionRepository(db)

    def list_permissions(self, params: PageParams) -> dict:
        permissions, total = self.repo.get_paginated(limit=params.limit, offset=params.offset)
        return paginate(permissions, total, params, PermissionResponse)

    def get_permission(self, permission_id: int) -> Permission:
        """
        Raises:
            NotFoundException: If permission not found
        """
        permission = self.repo.get_by_id(permission_id)
        if not permission:
            raise NotFoundException(f"Permission with ID {permission_id} not found")
        return permission

    def group_by_module(self) -> list[dict]:
        """Group every permission under its module, modules in alphabetical order"""
        grouped: dict[str, list[Permission]] = {}
        for permission in self.repo.get_all():
            grouped.setdefault(permission.module, []).append(permission)

        return [
            {"module": module, "count": len(permissions), "permissions": permissions}
            for module, permissions in grouped.items()
        ]

    def list_modules(self) -> list[str]:
        return self.repo.get_modules()

    def get_module(self, module: str) -> list[Permission]:
        """
        Raises:
            NotFoundException: If the module has no permissions
        """
        permissions = self.repo.get_by_module(module)
        if not permissions:
            raise NotFoundException(f"No permissions found for module '{module}'")
        return permissions
