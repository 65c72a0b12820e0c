from sqlalchemy.orm import Session
from app.models.user import User
from app.models.role import Role, UserRole
from app.models.permission import Permission, UserPermission


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        """Get user by internal ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> User | None:
        """Get user by login email"""
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id_and_tenant(self, user_id: int, tenant_id: int) -> User | None:
        """
        Get user ensuring it belongs to tenant (multi-tenant safety).

        Returns None if user doesn't exist or belongs to another tenant.
        """
        return (
            self.db.query(User)
            .filter(User.id == user_id, User.tenant_id == tenant_id)
            .first()
        )

    def get_paginated(
        self, limit: int, offset: int, tenant_id: int | None = None
    ) -> tuple[list[User], int]:
        """
        Get a page of users, newest first.

        Args:
            limit: Maximum number of results
            offset: Pagination offset
            tenant_id: Restrict to one tenant when given

        Returns:
            Tuple of (users list, total count)
        """
        query = self.db.query(User)
        if tenant_id is not None:
            query = query.filter(User.tenant_id == tenant_id)

        total = query.count()
        users = (
            query.order_by(User.created_at.desc(), User.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return users, total

    def create(self, user: User) -> User:
        """Create new user"""
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User) -> User:
        """Commit staged changes on the user and its links"""
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        """Delete user (cascades to role and permission links)"""
        self.db.delete(user)
        self.db.commit()

    # Link staging helpers. None of these commit; the caller's update()
    # persists them together with any other pending change.

    def stage_clear_links(self, user: User) -> None:
        """Drop every UserRole and UserPermission row of the user"""
        user.user_roles.clear()
        user.user_permissions.clear()

    def stage_add_roles(self, user: User, roles: list[Role]) -> None:
        """Link roles to user, skipping ones already linked"""
        linked = {link.role_id for link in user.user_roles}
        for role in roles:
            if role.id not in linked:
                user.user_roles.append(UserRole(role=role))
                linked.add(role.id)

    def stage_remove_roles(self, user: User, role_ids: list[int]) -> None:
        to_remove = set(role_ids)
        for link in list(user.user_roles):
            if link.role_id in to_remove:
                user.user_roles.remove(link)

    def stage_add_permissions(self, user: User, permissions: list[Permission]) -> None:
        """Grant permissions directly to user, skipping existing grants"""
        linked = {link.permission_id for link in user.user_permissions}
        for permission in permissions:
            if permission.id not in linked:
                user.user_permissions.append(UserPermission(permission=permission))
                linked.add(permission.id)

    def stage_remove_permissions(self, user: User, permission_ids: list[int]) -> None:
        to_remove = set(permission_ids)
        for link in list(user.user_permissions):
            if link.permission_id in to_remove:
                user.user_permissions.remove(link)
