"""Effective-role resolution and role-membership predicates.

All role comparisons in the application go through this module. Predicates
check membership in a role set, so adding a role only means extending the
relevant set below.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Final

from townhall.auth.permissions import KNOWN_ROLES, Permission, Role, permissions_for

logger = logging.getLogger(__name__)

SUPERADMIN_ROLES: Final[frozenset[str]] = frozenset({Role.SUPERADMIN.value})
ADMIN_ROLES: Final[frozenset[str]] = frozenset({Role.SUPERADMIN.value, Role.ADMIN.value})
CONTRIBUTOR_ROLES: Final[frozenset[str]] = frozenset({
    Role.SUPERADMIN.value,
    Role.ADMIN.value,
    Role.CONTRIBUTOR.value,
})
AUTHENTICATED_ROLES: Final[frozenset[str]] = CONTRIBUTOR_ROLES | {Role.USER.value}


def reconcile_role(role: str | None, is_admin: bool | None) -> str:
    """Return the canonical role for a stored user record.

    Older records only carry the ``is_admin`` flag. When the role column is
    empty the flag maps to ``superadmin``, otherwise to ``user``.
    """
    if isinstance(role, Role):
        return role.value
    if isinstance(role, str) and role.strip():
        return role.strip()
    return Role.SUPERADMIN.value if is_admin else Role.USER.value


def derived_is_admin(role: str | Role) -> bool:
    """Return the value written to the deprecated ``is_admin`` column."""
    return reconcile_role(role, False) in ADMIN_ROLES


def resolve_role(actor: Any | None) -> str:
    """Return the effective role of ``actor``.

    Absent actors are guests. Unknown role strings are passed through so that
    they resolve to an empty permission set.
    """
    if actor is None:
        return Role.GUEST.value
    role = reconcile_role(getattr(actor, "role", None), getattr(actor, "is_admin", False))
    if role not in KNOWN_ROLES:
        logger.warning(
            "Malformed role %r on user %s; denying all permissions",
            role,
            getattr(actor, "id", None),
        )
    return role


def is_super_admin(actor: Any | None) -> bool:
    """Return True for superadmins."""
    return resolve_role(actor) in SUPERADMIN_ROLES


def is_admin_or_above(actor: Any | None) -> bool:
    """Return True for admins and superadmins."""
    return resolve_role(actor) in ADMIN_ROLES


def is_contributor_or_above(actor: Any | None) -> bool:
    """Return True for contributors, admins and superadmins."""
    return resolve_role(actor) in CONTRIBUTOR_ROLES


@dataclass(frozen=True)
class RoleFlags:
    """Capability snapshot of an actor, used by UI-facing responses."""

    effective_role: str
    is_super_admin: bool
    is_admin_or_above: bool
    is_contributor_or_above: bool
    permissions: frozenset[Permission]


def role_flags(actor: Any | None) -> RoleFlags:
    """Resolve ``actor`` once and derive every predicate from the result."""
    role = resolve_role(actor)
    return RoleFlags(
        effective_role=role,
        is_super_admin=role in SUPERADMIN_ROLES,
        is_admin_or_above=role in ADMIN_ROLES,
        is_contributor_or_above=role in CONTRIBUTOR_ROLES,
        permissions=permissions_for(role),
    )
