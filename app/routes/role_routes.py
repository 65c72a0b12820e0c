from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_tenant_admin, tenant_role
from app.models.identity import Identity
from app.models.role import Role
from app.services.role_service import RoleService
from app.schemas.common import PathId
from app.schemas.pagination import Page, PageParams, page_params
from app.schemas.role_schemas import RoleCreate, RoleUpdate, RolePermissionsUpdate, RoleResponse

router = APIRouter()


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(
    data: RoleCreate,
    identity: Identity = Depends(require_tenant_admin),
    db: Session = Depends(get_db),
):
    """
    Create a role in the caller's tenant.

    - **Requires Tenant Admin**
    - Role names are unique per tenant
    """
    service = RoleService(db)
    return service.create_role(data, identity)


@router.get("", response_model=Page[RoleResponse])
def list_roles(
    params: PageParams = Depends(page_params()),
    identity: Identity = Depends(require_tenant_admin),
    db: Session = Depends(get_db),
):
    service = RoleService(db)
    return service.list_roles(params, identity)


@router.get("/{role_id}", response_model=RoleResponse)
def get_role(role_id: PathId, role: Role = Depends(tenant_role)):
    return role


@router.patch("/{role_id}", response_model=RoleResponse)
def update_role(
    role_id: PathId,
    data: RoleUpdate,
    role: Role = Depends(tenant_role),
    db: Session = Depends(get_db),
):
    service = RoleService(db)
    return service.update_role(role, data)


@router.put("/{role_id}/permissions", response_model=RoleResponse)
def set_role_permissions(
    role_id: PathId,
    data: RolePermissionsUpdate,
    role: Role = Depends(tenant_role),
    db: Session = Depends(get_db),
):
    """Replace the role's permission set"""
    service = RoleService(db)
    return service.set_permissions(role, data.permission_ids)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(
    role_id: PathId,
    role: Role = Depends(tenant_role),
    db: Session = Depends(get_db),
):
    """Delete a role; users holding it lose it"""
    service = RoleService(db)
    service.delete_role(role)
    return None
