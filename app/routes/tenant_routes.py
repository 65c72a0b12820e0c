from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_global_admin
from app.models.identity import Identity
from app.services.tenant_service import TenantService
from app.schemas.common import PathId
from app.schemas.pagination import Page, PageParams, page_params
from app.schemas.tenant_schemas import TenantCreate, TenantUpdate, TenantResponse

router = APIRouter()


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(
    data: TenantCreate,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """
    Create a new tenant.

    - **Requires Super Admin**
    - Slug and document must be unique
    """
    service = TenantService(db)
    return service.create_tenant(data)


@router.get("", response_model=Page[TenantResponse])
def list_tenants(
    params: PageParams = Depends(page_params()),
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """List all tenants, newest first"""
    service = TenantService(db)
    return service.list_tenants(params)


@router.get("/active", response_model=Page[TenantResponse])
def list_active_tenants(
    params: PageParams = Depends(page_params()),
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """List active tenants only"""
    service = TenantService(db)
    return service.list_tenants(params, active_only=True)


@router.get("/{tenant_id}", response_model=TenantResponse)
def get_tenant(
    tenant_id: PathId,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    service = TenantService(db)
    return service.get_tenant(tenant_id)


@router.patch("/{tenant_id}", response_model=TenantResponse)
def update_tenant(
    tenant_id: PathId,
    data: TenantUpdate,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """
    Update tenant details.

    - A tenant can keep its own slug/document without conflict
    """
    service = TenantService(db)
    return service.update_tenant(tenant_id, data)


@router.patch("/{tenant_id}/toggle-active", response_model=TenantResponse)
def toggle_tenant_active(
    tenant_id: PathId,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """Activate or deactivate a tenant (member accounts are not changed)"""
    service = TenantService(db)
    return service.toggle_active(tenant_id)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tenant(
    tenant_id: PathId,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """
    Delete a tenant.

    - **Irreversible**: removes all users and roles of the tenant
    """
    service = TenantService(db)
    service.delete_tenant(tenant_id)
    return None
