"""
Seed reference data.

Upserts the permission catalog and creates the bootstrap super admin
from ADMIN_EMAIL / ADMIN_PASSWORD. Safe to run repeatedly.

Usage:
    python -m app.seed
"""

import logging
from sqlalchemy.orm import Session

from app.config import settings
from app.core.security import hash_password
from app.database import SessionLocal
from app.models.tenant import Tenant  # noqa: F401  (registers mapper)
from app.models.role import Role  # noqa: F401
from app.models.permission import Permission
from app.models.user import User
from app.repositories.permission_repository import PermissionRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

USER_PERMISSIONS = [
    ("add_user", "Add user", "Create new users"),
    ("view_user", "View user", "View user details"),
    ("change_user", "Change user", "Edit user details"),
    ("delete_user", "Delete user", "Delete users"),
    ("assign_user_roles", "Assign user roles", "Assign roles to users"),
    ("assign_user_permissions", "Assign user permissions", "Grant permissions directly to users"),
    ("view_user_permissions", "View user permissions", "View the effective permissions of a user"),
    ("toggle_user_active", "Toggle user active", "Activate or deactivate users"),
]


def seed_permissions(db: Session) -> list[Permission]:
    """Create or refresh the users-module permission catalog"""
    repo = PermissionRepository(db)
    permissions = [
        repo.upsert(codename=codename, name=name, module="users", description=description)
        for codename, name, description in USER_PERMISSIONS
    ]
    logger.info("%s permissions created/updated", len(permissions))
    return permissions


def seed_super_admin(
    db: Session, email: str | None, password: str | None, name: str = "Administrator"
) -> User | None:
    """
    Create the bootstrap super admin if it does not exist yet.

    Returns:
        The existing or created super admin, or None when credentials
        are not configured
    """
    if not email or not password:
        logger.warning("ADMIN_EMAIL or ADMIN_PASSWORD not set, skipping super admin creation")
        return None

    repo = UserRepository(db)
    existing = repo.get_by_email(email)
    if existing:
        logger.info("Super admin already exists: %s", email)
        return existing

    admin = User(
        email=email,
        name=name,
        password=hash_password(password),
        is_super_admin=True,
        is_tenant_admin=False,
        tenant_id=None,  # super admins belong to no tenant
        is_active=True,
    )
    admin = repo.create(admin)
    logger.info("Super admin created: %s", admin.email)
    return admin


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL)
    db = SessionLocal()
    try:
        seed_permissions(db)
        seed_super_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.ADMIN_NAME)
    finally:
        db.close()


if __name__ == "__main__":
    main()
