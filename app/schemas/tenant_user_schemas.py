from pydantic import BaseModel, EmailStr, Field
from app.schemas.common import EntityId
from app.schemas.user_schemas import MIN_PASSWORD_LENGTH


class TenantUserCreate(BaseModel):
    """
    Create a user inside the caller's tenant.

    The tenant is inherited from the tenant admin; admin flags cannot be
    set from here.
    """

    email: EmailStr
    name: str | None = Field(None, max_length=255)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    role_ids: list[EntityId] = Field(default_factory=list)
    is_active: bool = True


class TenantUserUpdate(BaseModel):
    """Tenant admin update of a member (tenant and admin flags are fixed)"""

    email: EmailStr | None = None
    name: str | None = Field(None, max_length=255)
    is_active: bool | None = None


class ProfileUpdate(BaseModel):
    """Self-service profile update"""

    email: EmailStr | None = None
    name: str | None = Field(None, max_length=255)
