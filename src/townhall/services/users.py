"""User registration, role changes and contributor applications.

Role changes happen only here, and only on behalf of an admin-or-above
actor. Trust score recomputation never calls into this module.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from townhall.auth.guard import authorize, require_admin
from townhall.auth.permissions import ContributorType, Permission, Role
from townhall.auth.roles import derived_is_admin, resolve_role
from townhall.core.errors import ContentNotFound, DuplicateName, NotEligible
from townhall.models import ContributorApplication, User
from townhall.models.contributor import (
    APPLICATION_APPROVED,
    APPLICATION_PENDING,
    APPLICATION_REJECTED,
)
from townhall.models.mixins import utcnow
from townhall.services.trust import is_contributor_eligible

__all__ = [
    "get_user",
    "get_users",
    "register_user",
    "change_role",
    "set_verified",
    "submit_application",
    "list_applications",
    "review_application",
]

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> User:
    """Return a single user by primary key."""
    user = db.get(User, user_id)
    if user is None:
        raise ContentNotFound("User not found")
    return user


def get_users(db: Session, actor: Any | None, skip: int = 0, limit: int = 100) -> Sequence[User]:
    """Return users with simple offset-based pagination."""
    authorize(actor, Permission.MANAGE_USERS)
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


def register_user(db: Session, *, username: str, email: str | None = None) -> User:
    """Persist a new account with the default ``user`` role and zero trust."""
    if db.query(User).filter(User.username == username).first() is not None:
        raise DuplicateName("Username already taken")
    user = User(
        username=username,
        email=email,
        role=Role.USER.value,
        is_admin=False,
        trust_score=0,
        verified=False,
    )
    db.add(user)
    db.flush()
    return user


def change_role(
    db: Session,
    actor: Any | None,
    user_id: int,
    role: Role | str,
    contributor_type: ContributorType | str | None = None,
) -> User:
    """Assign ``role`` to a user and keep the legacy flag in sync."""
    authorize(actor, Permission.MANAGE_ROLES)
    role = Role(role)
    user = get_user(db, user_id)
    previous = resolve_role(user)
    user.role = role.value
    user.is_admin = derived_is_admin(role)
    if role is Role.CONTRIBUTOR:
        if contributor_type is not None:
            user.contributor_type = ContributorType(contributor_type).value
    else:
        user.contributor_type = None
    db.flush()
    logger.info("User %s role changed %s -> %s by user %s", user.id, previous, role.value, actor.id)
    return user


def set_verified(db: Session, actor: Any | None, user_id: int, verified: bool) -> User:
    """Mark a user as verified or unverified."""
    authorize(actor, Permission.MANAGE_USERS)
    user = get_user(db, user_id)
    user.verified = verified
    db.flush()
    return user


def submit_application(
    db: Session,
    actor: Any | None,
    *,
    contributor_type: ContributorType | str,
    motivation: str,
    experience: str,
    website_url: str | None = None,
) -> ContributorApplication:
    """File a contributor application for ``actor``.

    Only plain users whose trust score has reached the eligibility threshold
    may apply, and only one application can be pending at a time.
    """
    authorize(actor, Permission.CREATE_POST)
    if resolve_role(actor) != Role.USER.value:
        raise NotEligible("Only members with the user role can apply")
    if not is_contributor_eligible(actor.trust_score):
        raise NotEligible("Trust score below the contributor threshold")
    pending = db.execute(
        select(ContributorApplication.id).where(
            ContributorApplication.user_id == actor.id,
            ContributorApplication.status == APPLICATION_PENDING,
        )
    ).first()
    if pending is not None:
        raise NotEligible("An application is already pending")

    application = ContributorApplication(
        user_id=actor.id,
        contributor_type=ContributorType(contributor_type).value,
        motivation=motivation,
        experience=experience,
        website_url=website_url,
        status=APPLICATION_PENDING,
        trust_score_at_submission=actor.trust_score,
    )
    db.add(application)
    db.flush()
    return application


def list_applications(
    db: Session,
    actor: Any | None,
    status: str | None = APPLICATION_PENDING,
) -> list[ContributorApplication]:
    """List contributor applications, pending ones by default."""
    require_admin(actor)
    stmt = select(ContributorApplication).order_by(ContributorApplication.id)
    if status is not None:
        stmt = stmt.where(ContributorApplication.status == status)
    return list(db.execute(stmt).scalars())


def review_application(
    db: Session,
    actor: Any | None,
    application_id: int,
    *,
    approve: bool,
    note: str | None = None,
) -> ContributorApplication:
    """Approve or reject an application; approval promotes the applicant."""
    require_admin(actor)
    application = db.get(ContributorApplication, application_id)
    if application is None:
        raise ContentNotFound("Application not found")
    if application.status != APPLICATION_PENDING:
        raise NotEligible("Application has already been reviewed")

    application.status = APPLICATION_APPROVED if approve else APPLICATION_REJECTED
    application.reviewed_by = actor.id
    application.reviewed_at = utcnow()
    application.review_note = note

    if approve:
        applicant = get_user(db, application.user_id)
        # Never demote an applicant who was promoted further in the meantime.
        if resolve_role(applicant) == Role.USER.value:
            applicant.role = Role.CONTRIBUTOR.value
            applicant.is_admin = derived_is_admin(Role.CONTRIBUTOR)
            applicant.contributor_type = application.contributor_type
        logger.info("Application %s approved by user %s", application.id, actor.id)
    db.flush()
    return application
