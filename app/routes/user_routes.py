from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_global_admin
from app.models.identity import Identity
from app.services.user_service import UserService
from app.schemas.common import PathId
from app.schemas.pagination import Page, PageParams, page_params
from app.schemas.permission_schemas import PermissionResponse
from app.schemas.user_schemas import (
    UserCreate,
    UserUpdate,
    PasswordUpdate,
    AssignRoles,
    AssignPermissions,
    UserResponse,
    EffectivePermissionsResponse,
)

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """
    Create a user.

    - **Requires Super Admin**
    - Super admins cannot be created here
    - Tenant admins must have a tenant_id
    """
    service = UserService(db)
    return service.create_user(data)


@router.get("", response_model=Page[UserResponse])
def list_users(
    params: PageParams = Depends(page_params()),
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    return service.list_users(params)


@router.get("/tenant/{tenant_id}", response_model=Page[UserResponse])
def list_users_by_tenant(
    tenant_id: PathId,
    params: PageParams = Depends(page_params()),
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """List the users of one tenant"""
    service = UserService(db)
    return service.list_users_by_tenant(tenant_id, params)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: PathId,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    return service.get_user(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: PathId,
    data: UserUpdate,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """
    Update a user.

    - Changing tenant_id removes all of the user's roles and direct permissions
    - is_super_admin cannot be changed
    """
    service = UserService(db)
    return service.update_user(user_id, data)


@router.patch("/{user_id}/password", response_model=UserResponse)
def update_password(
    user_id: PathId,
    data: PasswordUpdate,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """Change a user's password (current password required)"""
    service = UserService(db)
    return service.update_password(user_id, data)


@router.patch("/{user_id}/toggle-active", response_model=UserResponse)
def toggle_user_active(
    user_id: PathId,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    return service.toggle_active(user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: PathId,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    service.delete_user(user_id)
    return None


@router.post("/{user_id}/roles", response_model=UserResponse)
def assign_roles(
    user_id: PathId,
    data: AssignRoles,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """
    Assign roles to a user.

    - All roles must belong to the user's tenant, otherwise nothing is assigned
    - Super admins cannot receive roles
    """
    service = UserService(db)
    return service.assign_roles(user_id, data.role_ids)


@router.delete("/{user_id}/roles", response_model=UserResponse)
def remove_roles(
    user_id: PathId,
    data: AssignRoles,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    return service.remove_roles(user_id, data.role_ids)


@router.post("/{user_id}/permissions", response_model=UserResponse)
def assign_permissions(
    user_id: PathId,
    data: AssignPermissions,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """Grant permissions directly to a user (all or nothing)"""
    service = UserService(db)
    return service.assign_permissions(user_id, data.permission_ids)


@router.delete("/{user_id}/permissions", response_model=UserResponse)
def remove_permissions(
    user_id: PathId,
    data: AssignPermissions,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    return service.remove_permissions(user_id, data.permission_ids)


@router.get("/{user_id}/permissions", response_model=EffectivePermissionsResponse)
def get_effective_permissions(
    user_id: PathId,
    identity: Identity = Depends(require_global_admin),
    db: Session = Depends(get_db),
):
    """
    Effective permissions of a user.

    - Super admins: unrestricted, no permissions listed
    - Others: union of role and direct permissions, without duplicates
    """
    service = UserService(db)
    effective = service.get_effective_permissions(user_id)
    return EffectivePermissionsResponse(
        user_id=user_id,
        unrestricted=effective.unrestricted,
        message="Super admin has full access" if effective.unrestricted else None,
        total_permissions=effective.total,
        from_roles=effective.from_roles,
        direct=effective.direct,
        permissions=[PermissionResponse.model_validate(p) for p in effective.permissions],
    )
