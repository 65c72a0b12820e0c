from pydantic import BaseModel, Field
from datetime import datetime

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class TenantCreate(BaseModel):
    """Create a tenant (Super Admin only)"""

    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(
        ...,
        min_length=1,
        max_length=100,
        pattern=SLUG_PATTERN,
        description="Lowercase letters, digits and hyphens",
    )
    document: str | None = Field(None, min_length=1, max_length=50, description="Fiscal ID")
    is_active: bool = True


class TenantUpdate(BaseModel):
    """Partial tenant update (Super Admin only)"""

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    document: str | None = Field(None, min_length=1, max_length=50)
    is_active: bool | None = None


class TenantResponse(BaseModel):
    """Tenant details response"""

    id: int
    name: str
    slug: str
    document: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TenantSummary(BaseModel):
    """Tenant reference embedded in user responses"""

    id: int
    name: str
    slug: str

    model_config = {"from_attributes": True}
