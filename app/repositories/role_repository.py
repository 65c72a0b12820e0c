"""Repository for Role model operations."""

from sqlalchemy.orm import Session
from app.models.role import Role, RolePermission
from app.models.permission import Permission


class RoleRepository:
    """Repository for tenant-scoped Role operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, role_id: int) -> Role | None:
        """Get role by ID regardless of tenant"""
        return self.db.query(Role).filter(Role.id == role_id).first()

    def get_by_name(self, tenant_id: int, name: str) -> Role | None:
        """Get role by name inside one tenant"""
        return (
            self.db.query(Role)
            .filter(Role.tenant_id == tenant_id, Role.name == name)
            .first()
        )

    def get_many_in_tenant(self, role_ids: list[int], tenant_id: int | None) -> list[Role]:
        """
        Get the roles among role_ids that belong to tenant_id.

        Callers compare the result size with the requested IDs to detect
        unknown or foreign roles. A None tenant matches nothing.
        """
        if tenant_id is None or not role_ids:
            return []
        return (
            self.db.query(Role)
            .filter(Role.id.in_(role_ids), Role.tenant_id == tenant_id)
            .all()
        )

    def get_paginated(self, tenant_id: int, limit: int, offset: int) -> tuple[list[Role], int]:
        """
        Get a page of a tenant's roles ordered by name.

        Returns:
            Tuple of (roles list, total count)
        """
        query = self.db.query(Role).filter(Role.tenant_id == tenant_id)
        total = query.count()
        roles = query.order_by(Role.name.asc(), Role.id.asc()).limit(limit).offset(offset).all()
        return roles, total

    def create(self, role: Role) -> Role:
        """Create new role"""
        self.db.add(role)
        self.db.commit()
        self.db.refresh(role)
        return role

    def update(self, role: Role) -> Role:
        """Commit staged changes on the role and its permission links"""
        self.db.commit()
        self.db.refresh(role)
        return role

    def delete(self, role: Role) -> None:
        """Delete role (cascades to user and permission links)"""
        self.db.delete(role)
        self.db.commit()

    def stage_set_permissions(self, role: Role, permissions: list[Permission]) -> None:
        """Replace the role's permission set; committed by update()"""
        # Flush inserts before deletes; re-adding a kept link would hit uq_role_permission
        wanted = {permission.id: permission for permission in permissions}
        for link in list(role.role_permissions):
            if link.permission_id not in wanted:
                role.role_permissions.remove(link)
        linked = {link.permission_id for link in role.role_permissions}
        for permission_id, permission in wanted.items():
            if permission_id not in linked:
                role.role_permissions.append(RolePermission(permission=permission))
