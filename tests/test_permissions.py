"""Tests for the static role-to-permission table."""

import pytest

from townhall.auth.guard import evaluate
from townhall.auth.permissions import (
    KNOWN_ROLES,
    ROLE_PERMISSIONS,
    Permission,
    Role,
    as_permission,
    permissions_for,
    role_has_permission,
)


class _Actor:
    def __init__(self, role: str | None, is_admin: bool = False, id: int = 1) -> None:
        self.role = role
        self.is_admin = is_admin
        self.id = id


@pytest.mark.parametrize("role", ["moderator", "root", "SUPERADMIN", "editor"])
def test_unknown_roles_have_no_permissions(role: str) -> None:
    """Roles missing from the table resolve to the empty set and are denied everything."""
    assert role not in KNOWN_ROLES
    assert permissions_for(role) == frozenset()
    actor = _Actor(role)
    for permission in Permission:
        assert evaluate(actor, permission).allowed is False


def test_none_role_has_no_permissions() -> None:
    assert permissions_for(None) == frozenset()


def test_role_sets_are_nested_by_enumeration() -> None:
    """Each role's set contains the next lower role's set."""
    superadmin = permissions_for(Role.SUPERADMIN)
    admin = permissions_for(Role.ADMIN)
    contributor = permissions_for(Role.CONTRIBUTOR)
    user = permissions_for(Role.USER)

    assert admin <= superadmin
    assert contributor <= admin
    assert user <= contributor
    assert permissions_for(Role.GUEST) == frozenset()


def test_superadmin_holds_every_permission() -> None:
    assert permissions_for("superadmin") == frozenset(Permission)


def test_admin_permissions_are_listed_explicitly() -> None:
    assert permissions_for("admin") == {
        Permission.CREATE_POST,
        Permission.CREATE_COMMENT,
        Permission.VOTE,
        Permission.AUTO_PUBLISH_POST,
        Permission.EDIT_ANY_POST,
        Permission.DELETE_ANY_POST,
        Permission.MODERATE_CONTENT,
        Permission.GENERATE_AI_POST,
    }


def test_contributor_auto_publishes_but_user_does_not() -> None:
    assert role_has_permission("contributor", Permission.AUTO_PUBLISH_POST)
    assert not role_has_permission("user", Permission.AUTO_PUBLISH_POST)


def test_permission_strings_are_accepted() -> None:
    assert role_has_permission("user", "vote")
    assert role_has_permission("admin", "moderate:content")
    assert not role_has_permission("admin", "manage:roles")
    assert not role_has_permission("superadmin", "fly:plane")


def test_as_permission_rejects_unknown_tags() -> None:
    assert as_permission("create:post") is Permission.CREATE_POST
    assert as_permission(Permission.VOTE) is Permission.VOTE
    assert as_permission("nope") is None


def test_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        ROLE_PERMISSIONS["guest"] = frozenset({Permission.VOTE})  # type: ignore[index]
