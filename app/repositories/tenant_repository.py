"""Repository for Tenant model operations."""

from sqlalchemy.orm import Session
from app.models.tenant import Tenant


class TenantRepository:
    """Repository for Tenant model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, tenant_id: int) -> Tenant | None:
        """
        Get tenant by ID.

        Args:
            tenant_id: Tenant ID

        Returns:
            Tenant object or None if not found
        """
        return self.db.query(Tenant).filter(Tenant.id == tenant_id).first()

    def get_by_slug(self, slug: str) -> Tenant | None:
        """Get tenant by its unique slug"""
        return self.db.query(Tenant).filter(Tenant.slug == slug).first()

    def get_by_document(self, document: str) -> Tenant | None:
        """Get tenant by its unique fiscal document"""
        return self.db.query(Tenant).filter(Tenant.document == document).first()

    def get_paginated(
        self, limit: int, offset: int, active_only: bool = False
    ) -> tuple[list[Tenant], int]:
        """
        Get a page of tenants, newest first.

        Args:
            limit: Maximum number of results
            offset: Pagination offset
            active_only: Only include tenants with is_active=True

        Returns:
            Tuple of (tenants list, total count)
        """
        query = self.db.query(Tenant)
        if active_only:
            query = query.filter(Tenant.is_active.is_(True))

        total = query.count()
        tenants = (
            query.order_by(Tenant.created_at.desc(), Tenant.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return tenants, total

    def create(self, tenant: Tenant) -> Tenant:
        """Insert tenant and return it with its ID populated"""
        self.db.add(tenant)
        self.db.commit()
        self.db.refresh(tenant)
        return tenant

    def update(self, tenant: Tenant) -> Tenant:
        """Commit field changes already applied to tenant"""
        self.db.commit()
        self.db.refresh(tenant)
        return tenant

    def delete(self, tenant: Tenant) -> None:
        """
        Delete a tenant.

        WARNING: cascades to every user and role of the tenant, together
        with their role and permission links, in a single commit.
        """
        self.db.delete(tenant)
        self.db.commit()
