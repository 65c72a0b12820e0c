import logging
from sqlalchemy.orm import Session
from app.models.tenant import Tenant
from app.repositories.tenant_repository import TenantRepository
from app.schemas.pagination import PageParams, paginate
from app.schemas.tenant_schemas import TenantCreate, TenantUpdate, TenantResponse
from app.core.exceptions import ErrorKind, NotFoundException, ConflictException

logger = logging.getLogger(__name__)


class TenantService:
    """Service layer for tenant lifecycle business logic (Super Admin only)"""

    def __init__(self, db: Session):
        self.db = db
        self.tenant_repo = TenantRepository(db)

    def create_tenant(self, data: TenantCreate) -> Tenant:
        """
        Create a new tenant.

        Raises:
            ConflictException: If slug or document already used
        """
        self._check_slug_available(data.slug)
        if data.document:
            self._check_document_available(data.document)

        tenant = Tenant(
            name=data.name,
            slug=data.slug,
            document=data.document,
            is_active=data.is_active,
        )
        tenant = self.tenant_repo.create(tenant)
        logger.info("Tenant created: tenant_id=%s slug=%s", tenant.id, tenant.slug)
        return tenant

    def list_tenants(self, params: PageParams, active_only: bool = False) -> dict:
        """Get one page of tenants, optionally only the active ones"""
        tenants, total = self.tenant_repo.get_paginated(
            limit=params.limit, offset=params.offset, active_only=active_only
        )
        return paginate(tenants, total, params, TenantResponse)

    def get_tenant(self, tenant_id: int) -> Tenant:
        """
        Get tenant by ID.

        Raises:
            NotFoundException: If tenant not found
        """
        tenant = self.tenant_repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundException(f"Tenant with ID {tenant_id} not found")
        return tenant

    def update_tenant(self, tenant_id: int, data: TenantUpdate) -> Tenant:
        """
        Update tenant fields.

        A tenant may keep its current slug/document; uniqueness is only
        checked against other tenants.
        """
        tenant = self.get_tenant(tenant_id)

        if data.slug is not None:
            self._check_slug_available(data.slug, exclude_id=tenant.id)
        if data.document is not None:
            self._check_document_available(data.document, exclude_id=tenant.id)

        for field, value in data.model_dump(exclude_unset=True).items():
            # document is the only nullable column; an explicit null clears it
            if value is None and field != "document":
                continue
            setattr(tenant, field, value)

        return self.tenant_repo.update(tenant)

    def delete_tenant(self, tenant_id: int) -> None:
        """
        Delete tenant with all its users, roles and their links.

        Irreversible. Everything goes in one commit, so a failure leaves
        the tenant untouched.
        """
        tenant = self.get_tenant(tenant_id)
        slug = tenant.slug
        user_count = len(tenant.users)
        self.tenant_repo.delete(tenant)
        logger.warning(
            "Tenant deleted: tenant_id=%s slug=%s users_removed=%s",
            tenant_id,
            slug,
            user_count,
        )

    def toggle_active(self, tenant_id: int) -> Tenant:
        """
        Flip the tenant's active flag.

        Member users keep their own is_active value.
        """
        tenant = self.get_tenant(tenant_id)
        tenant.is_active = not tenant.is_active
        return self.tenant_repo.update(tenant)

    def _check_slug_available(self, slug: str, exclude_id: int | None = None) -> None:
        existing = self.tenant_repo.get_by_slug(slug)
        if existing and existing.id != exclude_id:
            raise ConflictException(f"Slug '{slug}' is already in use", ErrorKind.CONFLICT_SLUG)

    def _check_document_available(self, document: str, exclude_id: int | None = None) -> None:
        existing = self.tenant_repo.get_by_document(document)
        if existing and existing.id != exclude_id:
            raise ConflictException(
                f"Document '{document}' is already in use", ErrorKind.CONFLICT_DOCUMENT
            )
