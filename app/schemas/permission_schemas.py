from datetime import datetime
from pydantic import BaseModel


class PermissionResponse(BaseModel):
    """Catalog entry"""

    id: int
    codename: str
    name: str
    module: str
    description: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class PermissionSummary(BaseModel):
    """Permission reference embedded in user and role responses"""

    id: int
    codename: str
    name: str
    module: str
    description: str | None

    model_config = {"from_attributes": True}


class PermissionsByModuleResponse(BaseModel):
    """Permissions grouped under one module"""

    module: str
    count: int
    permissions: list[PermissionResponse]
