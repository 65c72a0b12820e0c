from datetime import datetime
from pydantic import BaseModel, Field
from app.schemas.common import EntityId
from app.schemas.permission_schemas import PermissionSummary


class RoleCreate(BaseModel):
    """Create a role in the caller's tenant"""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    permission_ids: list[EntityId] = Field(default_factory=list)


class RoleUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class RolePermissionsUpdate(BaseModel):
    """Replace a role's permission set"""

    permission_ids: list[EntityId]


class RoleSummary(BaseModel):
    """Role reference embedded in user responses"""

    id: int
    name: str
    description: str | None

    model_config = {"from_attributes": True}


class RoleResponse(BaseModel):
    id: int
    name: str
    description: str | None
    tenant_id: int
    permissions: list[PermissionSummary]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
