"""
Authorization gates and policies.

A gate is a pure function of the resolved Identity returning a Decision.
A policy is an ordered tuple of gates. Evaluation fails closed: the first
denial wins and the remaining gates are not evaluated.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from app.core.exceptions import (
    ErrorKind,
    TenantAdminException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
)
from app.models.identity import Identity
from app.models.permission import Permission
from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """Outcome of a single gate"""

    allowed: bool
    reason: ErrorKind | None = None
    message: str = ""


ALLOW = Decision(allowed=True)


def deny(reason: ErrorKind, message: str) -> Decision:
    return Decision(allowed=False, reason=reason, message=message)


Gate = Callable[[Identity | None], Decision]


# Gate catalogue


def authenticated(identity: Identity | None) -> Decision:
    if identity is None:
        return deny(ErrorKind.NOT_AUTHENTICATED, "Not authenticated")
    return ALLOW


def active(identity: Identity) -> Decision:
    if not identity.is_active:
        return deny(ErrorKind.ACCOUNT_DISABLED, "Account is disabled")
    return ALLOW


def global_admin(identity: Identity) -> Decision:
    if not identity.is_super_admin:
        return deny(ErrorKind.ADMIN_ONLY, "Access denied. Super admins only.")
    return ALLOW


def tenant_member(identity: Identity) -> Decision:
    if identity.is_super_admin:
        return deny(
            ErrorKind.SUPER_ADMINS_EXCLUDED,
            "Super admins cannot access tenant resources. Use the global administration endpoints.",
        )
    if identity.tenant_id is None:
        return deny(ErrorKind.NO_TENANT, "User does not belong to any tenant")
    return ALLOW


def tenant_admin(identity: Identity) -> Decision:
    """Must run after tenant_member, which guarantees a tenant is present."""
    if not identity.is_tenant_admin:
        return deny(
            ErrorKind.TENANT_ADMIN_ONLY,
            "Access denied. Tenant admins only.",
        )
    return ALLOW


def tenant_isolation(identity: Identity, resource: Any | None, label: str) -> Decision:
    """
    Check a tenant-owned resource against the caller's tenant.

    Missing and foreign resources both produce the same message; the
    foreign case keeps its own reason internally but is reported to the
    client as not found (see to_exception).
    """
    message = f"{label} not found"
    if resource is None:
        return deny(ErrorKind.RESOURCE_NOT_FOUND, message)
    if resource.tenant_id != identity.tenant_id:
        return deny(ErrorKind.CROSS_TENANT_ACCESS, message)
    return ALLOW


# Composite policies

AUTHENTICATED: tuple[Gate, ...] = (authenticated, active)
TENANT_MANAGEMENT: tuple[Gate, ...] = (authenticated, active, global_admin)
TENANT_USER_ADMIN: tuple[Gate, ...] = (authenticated, active, tenant_member, tenant_admin)
SELF_SERVICE: tuple[Gate, ...] = (authenticated, active, tenant_member)
PERMISSION_CATALOG: tuple[Gate, ...] = (authenticated, active, tenant_member, tenant_admin)


def evaluate(identity: Identity | None, gates: tuple[Gate, ...]) -> Decision:
    """Run gates in order and return the first denial, or ALLOW."""
    for gate in gates:
        if identity is None and gate is not authenticated:
            # Every gate except authenticated needs an identity
            return authenticated(identity)
        decision = gate(identity)
        if not decision.allowed:
            return decision
    return ALLOW


_FORBIDDEN_REASONS = {
    ErrorKind.ACCOUNT_DISABLED,
    ErrorKind.TENANT_DISABLED,
    ErrorKind.ADMIN_ONLY,
    ErrorKind.TENANT_ADMIN_ONLY,
    ErrorKind.NO_TENANT,
    ErrorKind.SUPER_ADMINS_EXCLUDED,
}


def to_exception(decision: Decision) -> TenantAdminException:
    """Map a denial to the exception surfaced to the client."""
    if decision.reason in (ErrorKind.RESOURCE_NOT_FOUND, ErrorKind.CROSS_TENANT_ACCESS):
        return NotFoundException(decision.message, ErrorKind.RESOURCE_NOT_FOUND)
    if decision.reason in _FORBIDDEN_REASONS:
        return ForbiddenException(decision.message, decision.reason)
    return UnauthorizedException(decision.message, decision.reason)


def enforce(identity: Identity | None, gates: tuple[Gate, ...]) -> Identity:
    """
    Evaluate a policy and raise on denial.

    Returns:
        The identity, guaranteed non-None once the policy passes

    Raises:
        UnauthorizedException / ForbiddenException: first failing gate
    """
    decision = evaluate(identity, gates)
    if not decision.allowed:
        logger.info(
            "Authorization denied: user_id=%s reason=%s",
            identity.id if identity else None,
            decision.reason.value,
        )
        raise to_exception(decision)
    return identity


def enforce_ownership(identity: Identity, resource: Any | None, label: str) -> Any:
    """Apply tenant_isolation and return the resource when it passes."""
    decision = tenant_isolation(identity, resource, label)
    if not decision.allowed:
        if decision.reason == ErrorKind.CROSS_TENANT_ACCESS:
            logger.warning(
                "Cross-tenant access blocked: user_id=%s tenant_id=%s resource=%s",
                identity.id,
                identity.tenant_id,
                label,
            )
        raise to_exception(decision)
    return resource


# Effective permissions


@dataclass(frozen=True)
class EffectivePermissions:
    """
    Permissions a user holds through roles and direct grants.

    unrestricted=True is the Super Admin sentinel: total access is
    implied and no permission rows are listed.
    """

    unrestricted: bool
    permissions: list[Permission] = field(default_factory=list)
    from_roles: int = 0
    direct: int = 0

    @classmethod
    def unrestricted_access(cls) -> "EffectivePermissions":
        return cls(unrestricted=True)

    @property
    def codenames(self) -> set[str]:
        return {permission.codename for permission in self.permissions}

    @property
    def total(self) -> int:
        return len(self.permissions)

    def allows(self, codename: str) -> bool:
        return self.unrestricted or codename in self.codenames


def resolve_effective_permissions(user: User) -> EffectivePermissions:
    """
    Union of role-derived and directly granted permissions, deduplicated
    by permission id. Direct grants supplement roles; nothing overrides.
    """
    if user.is_super_admin:
        return EffectivePermissions.unrestricted_access()

    role_permissions = [
        link.permission for user_role in user.user_roles for link in user_role.role.role_permissions
    ]
    direct_permissions = [link.permission for link in user.user_permissions]

    unique: dict[int, Permission] = {}
    for permission in [*role_permissions, *direct_permissions]:
        unique.setdefault(permission.id, permission)

    return EffectivePermissions(
        unrestricted=False,
        permissions=sorted(unique.values(), key=lambda p: (p.module, p.codename)),
        from_roles=len(role_permissions),
        direct=len(direct_permissions),
    )
