"""Static role-to-permission table.

Every role lists its permissions explicitly; nothing is inherited by walking a
hierarchy. Roles that are not in the table resolve to the empty set.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping


class Role(str, Enum):
    """Roles an actor can hold."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    CONTRIBUTOR = "contributor"
    USER = "user"
    GUEST = "guest"


class ContributorType(str, Enum):
    """Subtypes granted alongside the contributor role."""

    SURGEON = "surgeon"
    PATIENT = "patient"
    INFLUENCER = "influencer"
    BLOGGER = "blogger"


class Permission(str, Enum):
    """Atomic capability tags."""

    CREATE_POST = "create:post"
    CREATE_COMMENT = "create:comment"
    VOTE = "vote"
    AUTO_PUBLISH_POST = "auto_publish:post"
    EDIT_ANY_POST = "edit:any_post"
    DELETE_ANY_POST = "delete:any_post"
    MODERATE_CONTENT = "moderate:content"
    GENERATE_AI_POST = "generate:ai_post"
    ACCESS_ANALYTICS = "access:analytics"
    MANAGE_USERS = "manage:users"
    MANAGE_ROLES = "manage:roles"
    MANAGE_SYSTEM = "manage:system"
    IMPERSONATE_USER = "impersonate:user"


ROLE_PERMISSIONS: Final[Mapping[str, frozenset[Permission]]] = MappingProxyType({
    Role.SUPERADMIN.value: frozenset({
        Permission.CREATE_POST,
        Permission.CREATE_COMMENT,
        Permission.VOTE,
        Permission.AUTO_PUBLISH_POST,
        Permission.EDIT_ANY_POST,
        Permission.DELETE_ANY_POST,
        Permission.MODERATE_CONTENT,
        Permission.GENERATE_AI_POST,
        Permission.ACCESS_ANALYTICS,
        Permission.MANAGE_USERS,
        Permission.MANAGE_ROLES,
        Permission.MANAGE_SYSTEM,
        Permission.IMPERSONATE_USER,
    }),
    Role.ADMIN.value: frozenset({
        Permission.CREATE_POST,
        Permission.CREATE_COMMENT,
        Permission.VOTE,
        Permission.AUTO_PUBLISH_POST,
        Permission.EDIT_ANY_POST,
        Permission.DELETE_ANY_POST,
        Permission.MODERATE_CONTENT,
        Permission.GENERATE_AI_POST,
    }),
    Role.CONTRIBUTOR.value: frozenset({
        Permission.CREATE_POST,
        Permission.CREATE_COMMENT,
        Permission.VOTE,
        Permission.AUTO_PUBLISH_POST,
    }),
    Role.USER.value: frozenset({
        Permission.CREATE_POST,
        Permission.CREATE_COMMENT,
        Permission.VOTE,
    }),
    Role.GUEST.value: frozenset(),
})

KNOWN_ROLES: Final[frozenset[str]] = frozenset(ROLE_PERMISSIONS)


def permissions_for(role: str | Role | None) -> frozenset[Permission]:
    """Return the permission set for ``role``; unknown roles get nothing."""
    if role is None:
        return frozenset()
    key = role.value if isinstance(role, Role) else role
    return ROLE_PERMISSIONS.get(key, frozenset())


def as_permission(value: Permission | str) -> Permission | None:
    """Return the ``Permission`` named by ``value``, or None for unknown tags."""
    if isinstance(value, Permission):
        return value
    try:
        return Permission(value)
    except ValueError:
        return None


def role_has_permission(role: str | Role | None, permission: Permission | str) -> bool:
    """Return True when ``role`` carries ``permission``."""
    return as_permission(permission) in permissions_for(role)
