"""Role-based access control for Townhall."""

from .guard import (
    Decision,
    authorize,
    authorize_owner_or,
    evaluate,
    has_role,
    require_admin,
    require_authenticated,
    require_contributor,
    require_super_admin,
)
from .permissions import ContributorType, Permission, Role, permissions_for
from .roles import (
    is_admin_or_above,
    is_contributor_or_above,
    is_super_admin,
    reconcile_role,
    resolve_role,
    role_flags,
)

__all__ = [
    "ContributorType", "Permission", "Role", "permissions_for",
    "reconcile_role", "resolve_role", "role_flags",
    "is_super_admin", "is_admin_or_above", "is_contributor_or_above",
    "Decision", "evaluate", "authorize", "authorize_owner_or",
    "has_role", "require_admin", "require_authenticated",
    "require_contributor", "require_super_admin",
]
