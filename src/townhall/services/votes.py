"""Vote aggregation for posts and comments.

A vote from the same user on the same target is unique. Repeating the same
vote removes it, voting the other way flips it, and the target's counters are
always adjusted by the resulting delta in a single UPDATE statement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import and_, case, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from townhall.auth.guard import authorize
from townhall.auth.permissions import Permission
from townhall.core.errors import InvalidVoteTarget, VoteTargetNotFound
from townhall.core.settings import settings
from townhall.models import Comment, Post, Vote
from townhall.models.post import POST_STATUS_PUBLISHED

logger = logging.getLogger(__name__)


class VoteType(str, Enum):
    """Direction of a vote."""

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


@dataclass(frozen=True)
class VoteTarget:
    """Exactly one of a post or a comment."""

    post_id: int | None = None
    comment_id: int | None = None

    def __post_init__(self) -> None:
        if (self.post_id is None) == (self.comment_id is None):
            raise InvalidVoteTarget("Vote must target exactly one post or comment")

    @property
    def model(self) -> type[Post] | type[Comment]:
        return Post if self.post_id is not None else Comment

    @property
    def target_id(self) -> int:
        return self.post_id if self.post_id is not None else self.comment_id  # type: ignore[return-value]

    @property
    def vote_column(self) -> Any:
        return Vote.post_id if self.post_id is not None else Vote.comment_id


@dataclass(frozen=True)
class VoteCounters:
    """Counters of the target after a vote was applied."""

    upvotes: int
    downvotes: int
    current_vote: VoteType | None


def _clamped(column: Any, delta: int) -> Any:
    """Return ``column + delta`` floored at zero as a SQL expression."""
    if delta == 0:
        return column
    return case((column + delta < 0, 0), else_=column + delta)


def _deltas(vote_type: VoteType, sign: int) -> tuple[int, int]:
    if vote_type is VoteType.UPVOTE:
        return sign, 0
    return 0, sign


def _opposite(vote_type: VoteType) -> VoteType:
    return VoteType.DOWNVOTE if vote_type is VoteType.UPVOTE else VoteType.UPVOTE


def _find_vote(db: Session, user_id: int, target: VoteTarget) -> Vote | None:
    return db.execute(
        select(Vote).where(
            Vote.user_id == user_id,
            target.vote_column == target.target_id,
        )
    ).scalar_one_or_none()


def votable_clause(target: VoteTarget) -> Any:
    """Return the filter a row must match to accept votes."""
    model = target.model
    clause = and_(model.id == target.target_id, model.deleted.is_(False))
    if model is Post:
        clause = and_(clause, Post.status == POST_STATUS_PUBLISHED)
    return clause


def _apply_once(db: Session, user_id: int, target: VoteTarget, vote_type: VoteType) -> VoteCounters:
    model = target.model
    # Lock the target row so concurrent voters serialize on it.
    row = db.execute(
        select(model.id).where(votable_clause(target)).with_for_update()
    ).scalar_one_or_none()
    if row is None:
        raise VoteTargetNotFound()

    existing = _find_vote(db, user_id, target)
    if existing is None:
        db.add(
            Vote(
                user_id=user_id,
                post_id=target.post_id,
                comment_id=target.comment_id,
                vote_type=vote_type.value,
            )
        )
        up, down = _deltas(vote_type, 1)
        current: VoteType | None = vote_type
    elif existing.vote_type == vote_type.value:
        db.delete(existing)
        up, down = _deltas(vote_type, -1)
        current = None
    else:
        existing.vote_type = vote_type.value
        up, down = _deltas(vote_type, 1)
        old_up, old_down = _deltas(_opposite(vote_type), -1)
        up, down = up + old_up, down + old_down
        current = vote_type

    db.flush()
    db.execute(
        update(model)
        .where(model.id == target.target_id)
        .values(
            upvotes=_clamped(model.upvotes, up),
            downvotes=_clamped(model.downvotes, down),
        )
        .execution_options(synchronize_session="fetch")
    )
    upvotes, downvotes = db.execute(
        select(model.upvotes, model.downvotes).where(model.id == target.target_id)
    ).one()
    return VoteCounters(upvotes=upvotes, downvotes=downvotes, current_vote=current)


def apply_vote(
    db: Session,
    actor: Any | None,
    target: VoteTarget,
    vote_type: VoteType | str,
) -> VoteCounters:
    """Create, toggle off or flip ``actor``'s vote on ``target``.

    Args:
        db: Database session; the caller commits.
        actor: Authenticated user casting the vote.
        target: Post or comment receiving the vote.
        vote_type: ``upvote`` or ``downvote``.

    Returns:
        The target's counters after the vote and the actor's current vote.

    Raises:
        Unauthenticated: If there is no actor.
        InsufficientPermission: If the actor's role cannot vote.
        VoteTargetNotFound: If the target does not exist, was deleted, or is a
            post still waiting for moderation.
    """
    authorize(actor, Permission.VOTE)
    vote_type = VoteType(vote_type)

    retries = 0
    while True:
        try:
            with db.begin_nested():
                return _apply_once(db, actor.id, target, vote_type)
        except IntegrityError:
            # Another request inserted the same (user, target) vote first.
            if retries >= settings.vote_conflict_retries:
                raise
            retries += 1
            logger.info(
                "Vote race on %s %s by user %s; retrying",
                target.model.__tablename__,
                target.target_id,
                actor.id,
            )


def get_target_counters(db: Session, target: VoteTarget) -> tuple[int, int]:
    """Return ``(upvotes, downvotes)`` of a target that accepts votes."""
    model = target.model
    row = db.execute(
        select(model.upvotes, model.downvotes).where(votable_clause(target))
    ).one_or_none()
    if row is None:
        raise VoteTargetNotFound()
    return row.upvotes, row.downvotes


def get_user_vote(db: Session, user_id: int, target: VoteTarget) -> VoteType | None:
    """Return the user's current vote on ``target``, if any."""
    vote = _find_vote(db, user_id, target)
    return VoteType(vote.vote_type) if vote is not None else None
