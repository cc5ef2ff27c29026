"""Authorization guard consulted before every mutation.

The guard is a pure gate: it reads the actor and the permission table and
either returns or raises. It never writes anything.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from townhall.auth.permissions import Permission, Role, role_has_permission
from townhall.auth.roles import (
    ADMIN_ROLES,
    CONTRIBUTOR_ROLES,
    SUPERADMIN_ROLES,
    resolve_role,
)
from townhall.core.errors import AuthError, InsufficientPermission, Unauthenticated

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check."""

    allowed: bool
    reason: AuthError | None = None


ALLOW = Decision(allowed=True)


def _is_anonymous(actor: Any | None) -> bool:
    return actor is None or resolve_role(actor) == Role.GUEST.value


def evaluate(actor: Any | None, permission: Permission | str) -> Decision:
    """Decide whether ``actor`` may perform ``permission`` without raising."""
    if _is_anonymous(actor):
        return Decision(allowed=False, reason=Unauthenticated())
    role = resolve_role(actor)
    if not role_has_permission(role, permission):
        return Decision(
            allowed=False,
            reason=InsufficientPermission(
                permission=getattr(permission, "value", permission),
                role=role,
            ),
        )
    return ALLOW


def require_authenticated(actor: Any | None) -> None:
    """Raise ``Unauthenticated`` for absent or guest actors."""
    if _is_anonymous(actor):
        raise Unauthenticated()


def authorize(actor: Any | None, permission: Permission | str) -> None:
    """Raise unless ``actor`` holds ``permission``."""
    decision = evaluate(actor, permission)
    if decision.reason is not None:
        _log_denial(actor, decision.reason)
        raise decision.reason


def _require_membership(actor: Any | None, roles: Iterable[str], label: str) -> None:
    require_authenticated(actor)
    role = resolve_role(actor)
    if role not in roles:
        error = InsufficientPermission(permission=label, role=role)
        _log_denial(actor, error)
        raise error


def require_super_admin(actor: Any | None) -> None:
    """Raise unless ``actor`` is a superadmin."""
    _require_membership(actor, SUPERADMIN_ROLES, "role:superadmin")


def require_admin(actor: Any | None) -> None:
    """Raise unless ``actor`` is an admin or superadmin."""
    _require_membership(actor, ADMIN_ROLES, "role:admin")


def require_contributor(actor: Any | None) -> None:
    """Raise unless ``actor`` is a contributor or above."""
    _require_membership(actor, CONTRIBUTOR_ROLES, "role:contributor")


def has_role(actor: Any | None, allowed_roles: Iterable[str | Role]) -> None:
    """Raise unless the effective role of ``actor`` is one of ``allowed_roles``."""
    allowed = frozenset(r.value if isinstance(r, Role) else r for r in allowed_roles)
    _require_membership(actor, allowed, "role:" + "|".join(sorted(allowed)))


def authorize_owner_or(
    actor: Any | None,
    owner_id: int | None,
    permission: Permission | str,
) -> None:
    """Allow owners through; everyone else needs ``permission``."""
    require_authenticated(actor)
    if owner_id is not None and getattr(actor, "id", None) == owner_id:
        return
    authorize(actor, permission)


def _log_denial(actor: Any | None, error: AuthError) -> None:
    logger.info(
        "Denied %s for user %s (role=%s)",
        getattr(error, "permission", None),
        getattr(actor, "id", None),
        getattr(error, "role", None),
    )
