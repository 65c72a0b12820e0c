from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from app.schemas.common import MAX_ID, EntityId
from app.schemas.tenant_schemas import TenantSummary
from app.schemas.role_schemas import RoleSummary
from app.schemas.permission_schemas import PermissionSummary, PermissionResponse

MIN_PASSWORD_LENGTH = 6


class UserCreate(BaseModel):
    """Create a user from the global administration endpoints"""

    email: EmailStr
    name: str | None = Field(None, max_length=255)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    tenant_id: int | None = Field(None, ge=1, le=MAX_ID)
    is_super_admin: bool = False
    is_tenant_admin: bool = False
    is_active: bool = True


class UserUpdate(BaseModel):
    """
    Partial user update (Super Admin only).

    Changing tenant_id drops every role and direct permission of the user.
    """

    email: EmailStr | None = None
    name: str | None = Field(None, max_length=255)
    tenant_id: int | None = Field(None, ge=1, le=MAX_ID)
    is_super_admin: bool | None = None
    is_tenant_admin: bool | None = None
    is_active: bool | None = None


class PasswordUpdate(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    new_password_confirm: str = Field(..., min_length=1)


class AssignRoles(BaseModel):
    role_ids: list[EntityId] = Field(..., min_length=1)


class AssignPermissions(BaseModel):
    permission_ids: list[EntityId] = Field(..., min_length=1)


class UserResponse(BaseModel):
    """User details; the password hash is never included"""

    id: int
    email: str
    name: str | None
    is_super_admin: bool
    is_tenant_admin: bool
    is_active: bool
    tenant_id: int | None
    tenant: TenantSummary | None
    roles: list[RoleSummary]
    permissions: list[PermissionSummary]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EffectivePermissionsResponse(BaseModel):
    """
    Effective permissions of a user.

    unrestricted=True means Super Admin: access to everything, with an
    empty permissions list.
    """

    user_id: int
    unrestricted: bool
    message: str | None = None
    total_permissions: int
    from_roles: int
    direct: int
    permissions: list[PermissionResponse]
