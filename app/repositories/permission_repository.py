"""Repository for the read-only Permission catalog."""

from sqlalchemy.orm import Session
from app.models.permission import Permission


class PermissionRepository:
    """Repository for Permission model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, permission_id: int) -> Permission | None:
        return self.db.query(Permission).filter(Permission.id == permission_id).first()

    def get_by_codename(self, codename: str) -> Permission | None:
        return self.db.query(Permission).filter(Permission.codename == codename).first()

    def get_many(self, permission_ids: list[int]) -> list[Permission]:
        """Get the permissions among permission_ids that exist"""
        if not permission_ids:
            return []
        return self.db.query(Permission).filter(Permission.id.in_(permission_ids)).all()

    def get_all(self) -> list[Permission]:
        """Get every permission ordered by module, then name"""
        return (
            self.db.query(Permission)
            .order_by(Permission.module.asc(), Permission.name.asc())
            .all()
        )

    def get_paginated(self, limit: int, offset: int) -> tuple[list[Permission], int]:
        """
        Get a page of permissions ordered by module, then name.

        Returns:
            Tuple of (permissions list, total count)
        """
        query = self.db.query(Permission)
        total = query.count()
        permissions = (
            query.order_by(Permission.module.asc(), Permission.name.asc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return permissions, total

    def get_by_module(self, module: str) -> list[Permission]:
        return (
            self.db.query(Permission)
            .filter(Permission.module == module)
            .order_by(Permission.name.asc())
            .all()
        )

    def get_modules(self) -> list[str]:
        """Get distinct module names in alphabetical order"""
        rows = (
            self.db.query(Permission.module)
            .distinct()
            .order_by(Permission.module.asc())
            .all()
        )
        return [row[0] for row in rows]

    def upsert(self, codename: str, name: str, module: str, description: str | None) -> Permission:
        """Create or refresh a catalog entry by codename (seed only)"""
        permission = self.get_by_codename(codename)
        if permission is None:
            permission = Permission(codename=codename)
            self.db.add(permission)
        permission.name = name
        permission.module = module
        permission.description = description
        self.db.commit()
        self.db.refresh(permission)
        return permission
