from typing import Any, Callable
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.authorization import (
    Gate,
    enforce,
    enforce_ownership,
    AUTHENTICATED,
    TENANT_MANAGEMENT,
    TENANT_USER_ADMIN,
    SELF_SERVICE,
    PERMISSION_CATALOG,
)
from app.database import get_db
from app.models.identity import Identity
from app.repositories.role_repository import RoleRepository
from app.repositories.user_repository import UserRepository
from app.schemas.common import is_valid_id
from app.services.auth_service import AuthService

# auto_error=False so a missing header reaches the `authenticated` gate
security = HTTPBearer(auto_error=False)


async def get_optional_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> Identity | None:
    """
    FastAPI dependency resolving the bearer token into an Identity.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT signature and expiry using SECRET_KEY
    3. Re-read the user from the database (active flag included)
    4. Return Identity, or None when no token was sent

    Raises:
        UnauthorizedException: If token invalid or user gone
        ForbiddenException: If account disabled
    """
    if credentials is None:
        return None
    return AuthService(db).resolve(credentials.credentials)


def require(policy: tuple[Gate, ...]) -> Callable:
    """Build a dependency that runs a gate policy and yields the Identity"""

    async def dependency(identity: Identity | None = Depends(get_optional_identity)) -> Identity:
        return enforce(identity, policy)

    return dependency


get_current_identity = require(AUTHENTICATED)
require_global_admin = require(TENANT_MANAGEMENT)
require_tenant_admin = require(TENANT_USER_ADMIN)
require_tenant_member = require(SELF_SERVICE)
require_catalog_access = require(PERMISSION_CATALOG)


class TenantOwned:
    """
    Per-endpoint declaration of a tenant-owned path resource.

    Runs the endpoint's gate policy, loads the resource named by
    path_param with loader, then applies tenant isolation. Resolves to the
    loaded resource. Missing and foreign resources fail identically.

    Usage:
        tenant_user = TenantOwned(load_user, "User", TENANT_USER_ADMIN, "user_id")

        @router.get("/users/{user_id}")
        def get_user(user: User = Depends(tenant_user)):
            ...
    """

    def __init__(
        self,
        loader: Callable[[Session, int], Any],
        label: str,
        policy: tuple[Gate, ...],
        path_param: str,
    ):
        self.loader = loader
        self.label = label
        self.policy = policy
        self.path_param = path_param

    async def __call__(
        self,
        request: Request,
        identity: Identity | None = Depends(get_optional_identity),
        db: Session = Depends(get_db),
    ) -> Any:
        identity = enforce(identity, self.policy)
        try:
            resource_id = int(request.path_params[self.path_param])
        except (KeyError, ValueError):
            resource_id = None
        # Out-of-range ids cannot exist; reported like any other missing resource
        if resource_id is not None and not is_valid_id(resource_id):
            resource_id = None
        resource = self.loader(db, resource_id) if resource_id is not None else None
        return enforce_ownership(identity, resource, self.label)


def load_user(db: Session, user_id: int):
    return UserRepository(db).get_by_id(user_id)


def load_role(db: Session, role_id: int):
    return RoleRepository(db).get_by_id(role_id)


tenant_user = TenantOwned(load_user, "User", TENANT_USER_ADMIN, "user_id")
tenant_role = TenantOwned(load_role, "Role", TENANT_USER_ADMIN, "role_id")
