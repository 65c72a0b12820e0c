from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_tenant_admin, require_tenant_member, tenant_user
from app.models.identity import Identity
from app.models.user import User
from app.services.tenant_user_service import TenantUserService
from app.schemas.common import PathId
from app.schemas.pagination import Page, PageParams, page_params
from app.schemas.tenant_user_schemas import TenantUserCreate, TenantUserUpdate, ProfileUpdate
from app.schemas.user_schemas import PasswordUpdate, UserResponse

router = APIRouter()


# Own profile (any tenant member)


@router.get("/profile", response_model=UserResponse)
def get_profile(
    identity: Identity = Depends(require_tenant_member),
    db: Session = Depends(get_db),
):
    """Get the caller's own profile"""
    service = TenantUserService(db)
    return service.get_profile(identity)


@router.patch("/profile", response_model=UserResponse)
def update_profile(
    data: ProfileUpdate,
    identity: Identity = Depends(require_tenant_member),
    db: Session = Depends(get_db),
):
    """Update the caller's own email or name"""
    service = TenantUserService(db)
    return service.update_profile(identity, data)


@router.patch("/profile/password", response_model=UserResponse)
def update_own_password(
    data: PasswordUpdate,
    identity: Identity = Depends(require_tenant_member),
    db: Session = Depends(get_db),
):
    """
    Change the caller's own password.

    - new_password and new_password_confirm must match
    - current_password must be correct
    """
    service = TenantUserService(db)
    return service.update_password(identity, data)


# Tenant user management (tenant admins)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_tenant_user(
    data: TenantUserCreate,
    identity: Identity = Depends(require_tenant_admin),
    db: Session = Depends(get_db),
):
    """
    Create a user in the caller's tenant.

    - **Requires Tenant Admin**
    - The new user inherits the admin's tenant
    - role_ids must all belong to the same tenant
    """
    service = TenantUserService(db)
    return service.create_user(data, identity)


@router.get("/users", response_model=Page[UserResponse])
def list_tenant_users(
    params: PageParams = Depends(page_params()),
    identity: Identity = Depends(require_tenant_admin),
    db: Session = Depends(get_db),
):
    """List users of the caller's tenant only"""
    service = TenantUserService(db)
    return service.list_users(params, identity)


@router.get("/users/{user_id}", response_model=UserResponse)
def get_tenant_user(user_id: PathId, user: User = Depends(tenant_user)):
    """Users of other tenants are reported as not found"""
    return user


@router.patch("/users/{user_id}", response_model=UserResponse)
def update_tenant_user(
    user_id: PathId,
    data: TenantUserUpdate,
    user: User = Depends(tenant_user),
    db: Session = Depends(get_db),
):
    service = TenantUserService(db)
    return service.update_user(user, data)


@router.patch("/users/{user_id}/toggle-active", response_model=UserResponse)
def toggle_tenant_user_active(
    user_id: PathId,
    user: User = Depends(tenant_user),
    db: Session = Depends(get_db),
):
    service = TenantUserService(db)
    return service.toggle_active(user)
