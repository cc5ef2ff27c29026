"""Tests for role administration and contributor applications."""

import pytest

from townhall.core.errors import (
    ContentNotFound,
    DuplicateName,
    InsufficientPermission,
    NotEligible,
)
from townhall.services import users as user_service

MOTIVATION = "I want to help patients understand their options. " * 5
EXPERIENCE = "Ten years of orthopedic nursing and patient education. " * 2


def _apply(db_session, actor, contributor_type="patient"):
    return user_service.submit_application(
        db_session,
        actor,
        contributor_type=contributor_type,
        motivation=MOTIVATION,
        experience=EXPERIENCE,
    )


def test_register_user_defaults(db_session) -> None:
    user = user_service.register_user(db_session, username="newbie", email="n@example.com")

    assert user.role == "user"
    assert user.trust_score == 0
    assert user.is_admin is False
    with pytest.raises(DuplicateName):
        user_service.register_user(db_session, username="newbie")


def test_superadmin_changes_role(db_session, superadmin, test_user) -> None:
    user_service.change_role(db_session, superadmin, test_user.id, "admin")

    assert test_user.role == "admin"
    assert test_user.is_admin is True


def test_demotion_clears_legacy_flag_and_subtype(db_session, superadmin, make_user) -> None:
    member = make_user("contributor")
    member.contributor_type = "surgeon"

    user_service.change_role(db_session, superadmin, member.id, "user")

    assert member.role == "user"
    assert member.is_admin is False
    assert member.contributor_type is None


def test_contributor_subtype_is_stored(db_session, superadmin, test_user) -> None:
    user_service.change_role(db_session, superadmin, test_user.id, "contributor", "blogger")

    assert test_user.contributor_type == "blogger"


def test_admin_cannot_change_roles(db_session, admin_user, test_user) -> None:
    with pytest.raises(InsufficientPermission):
        user_service.change_role(db_session, admin_user, test_user.id, "admin")

    assert test_user.role == "user"


def test_invalid_role_value(db_session, superadmin, test_user) -> None:
    with pytest.raises(ValueError):
        user_service.change_role(db_session, superadmin, test_user.id, "moderator")


def test_change_role_unknown_user(db_session, superadmin) -> None:
    with pytest.raises(ContentNotFound):
        user_service.change_role(db_session, superadmin, 5555, "admin")


def test_set_verified_requires_user_management(db_session, superadmin, admin_user, test_user) -> None:
    with pytest.raises(InsufficientPermission):
        user_service.set_verified(db_session, admin_user, test_user.id, True)

    user_service.set_verified(db_session, superadmin, test_user.id, True)
    assert test_user.verified is True


def test_application_requires_threshold(db_session, make_user) -> None:
    with pytest.raises(NotEligible):
        _apply(db_session, make_user("user", trust_score=49))


def test_application_requires_user_role(db_session, make_user) -> None:
    with pytest.raises(NotEligible):
        _apply(db_session, make_user("contributor", trust_score=80))


def test_only_one_pending_application(db_session, make_user) -> None:
    applicant = make_user("user", trust_score=60)
    application = _apply(db_session, applicant)

    assert application.status == "pending"
    assert application.trust_score_at_submission == 60
    with pytest.raises(NotEligible):
        _apply(db_session, applicant)


def test_approval_promotes_applicant(db_session, make_user, admin_user) -> None:
    applicant = make_user("user", trust_score=60)
    application = _apply(db_session, applicant, contributor_type="surgeon")

    user_service.review_application(db_session, admin_user, application.id, approve=True)

    assert application.status == "approved"
    assert application.reviewed_by == admin_user.id
    assert application.reviewed_at is not None
    assert applicant.role == "contributor"
    assert applicant.contributor_type == "surgeon"


def test_rejection_keeps_role(db_session, make_user, admin_user) -> None:
    applicant = make_user("user", trust_score=60)
    application = _apply(db_session, applicant)

    user_service.review_application(
        db_session, admin_user, application.id, approve=False, note="Need more detail"
    )

    assert application.status == "rejected"
    assert application.review_note == "Need more detail"
    assert applicant.role == "user"
    with pytest.raises(NotEligible):
        user_service.review_application(db_session, admin_user, application.id, approve=True)


def test_approval_never_demotes(db_session, make_user, superadmin, admin_user) -> None:
    applicant = make_user("user", trust_score=60)
    application = _apply(db_session, applicant)
    user_service.change_role(db_session, superadmin, applicant.id, "admin")

    user_service.review_application(db_session, admin_user, application.id, approve=True)

    assert applicant.role == "admin"


def test_contributor_cannot_review(db_session, make_user, contributor) -> None:
    application = _apply(db_session, make_user("user", trust_score=60))

    with pytest.raises(InsufficientPermission):
        user_service.review_application(db_session, contributor, application.id, approve=True)
    with pytest.raises(InsufficientPermission):
        user_service.list_applications(db_session, contributor)


def test_list_applications_by_status(db_session, make_user, admin_user) -> None:
    first = _apply(db_session, make_user("user", trust_score=60))
    second = _apply(db_session, make_user("user", trust_score=70))
    user_service.review_application(db_session, admin_user, first.id, approve=False)

    assert user_service.list_applications(db_session, admin_user) == [second]
    assert user_service.list_applications(db_session, admin_user, None) == [first, second]
