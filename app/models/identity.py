"""Resolved identity for request authorization."""

from dataclasses import dataclass
from app.models.user import User


@dataclass(frozen=True)
class GlobalScope:
    """Identity operating outside any tenant (Super Admins only)"""

    tenant_id: None = None


@dataclass(frozen=True)
class BelongsTo:
    """Identity bound to exactly one tenant"""

    tenant_id: int


TenantScope = GlobalScope | BelongsTo


@dataclass(frozen=True)
class Identity:
    """
    Snapshot of the authenticated user, rebuilt from the database on
    every request.

    The tenant relationship is carried as an explicit TenantScope, so the
    tenancy invariants are checked once at construction time:
    - a Super Admin always has GlobalScope
    - a Tenant Admin always has BelongsTo

    Attributes:
        id: User ID
        email: Login email
        name: Display name (optional)
        is_super_admin: Global unrestricted access
        is_tenant_admin: Administrative rights inside own tenant
        is_active: Soft gate checked on every request
        scope: GlobalScope or BelongsTo(tenant_id)
    """

    id: int
    email: str
    name: str | None
    is_super_admin: bool
    is_tenant_admin: bool
    is_active: bool
    scope: TenantScope

    def __post_init__(self) -> None:
        if self.is_super_admin and not isinstance(self.scope, GlobalScope):
            raise ValueError("A super admin cannot belong to a tenant")
        if self.is_tenant_admin and not isinstance(self.scope, BelongsTo):
            raise ValueError("A tenant admin must belong to a tenant")

    @property
    def tenant_id(self) -> int | None:
        return self.scope.tenant_id

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        scope = BelongsTo(user.tenant_id) if user.tenant_id is not None else GlobalScope()
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            is_super_admin=user.is_super_admin,
            is_tenant_admin=user.is_tenant_admin,
            is_active=user.is_active,
            scope=scope,
        )

    def __repr__(self) -> str:
        return f"<Identity(id={self.id}, scope={self.scope})>"
