from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_catalog_access
from app.models.identity import Identity
from app.services.permission_service import PermissionService
from app.schemas.common import PathId
from app.schemas.pagination import Page, PageParams, page_params
from app.schemas.permission_schemas import PermissionResponse, PermissionsByModuleResponse

router = APIRouter()


@router.get("", response_model=Page[PermissionResponse])
def list_permissions(
    params: PageParams = Depends(page_params(default_limit=50)),
    identity: Identity = Depends(require_catalog_access),
    db: Session = Depends(get_db),
):
    """
    Browse the permission catalog.

    - **Requires Tenant Admin**
    - Ordered by module, then name
    """
    service = PermissionService(db)
    return service.list_permissions(params)


@router.get("/by-module", response_model=list[PermissionsByModuleResponse])
def list_permissions_by_module(
    identity: Identity = Depends(require_catalog_access),
    db: Session = Depends(get_db),
):
    service = PermissionService(db)
    return service.group_by_module()


@router.get("/modules", response_model=list[str])
def list_modules(
    identity: Identity = Depends(require_catalog_access),
    db: Session = Depends(get_db),
):
    service = PermissionService(db)
    return service.list_modules()


@router.get("/module/{module_name}", response_model=list[PermissionResponse])
def get_module_permissions(
    module_name: str,
    identity: Identity = Depends(require_catalog_access),
    db: Session = Depends(get_db),
):
    service = PermissionService(db)
    return service.get_module(module_name)


@router.get("/{permission_id}", response_model=PermissionResponse)
def get_permission(
    permission_id: PathId,
    identity: Identity = Depends(require_catalog_access),
    db: Session = Depends(get_db),
):
    service = PermissionService(db)
    return service.get_permission(permission_id)
