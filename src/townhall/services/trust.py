"""Trust score computation and contributor eligibility.

The trust score summarizes a user's published content and the votes it has
received. Reaching the eligibility threshold only lets a user apply to become
a contributor; this module never writes to ``User.role``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from fastapi import BackgroundTasks
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from townhall.core.errors import ContentNotFound
from townhall.core.settings import settings
from townhall.db.session import SessionScope
from townhall.models import Comment, Post, User, Vote
from townhall.models.post import POST_STATUS_PUBLISHED

logger = logging.getLogger(__name__)

TRUST_LEVELS: tuple[tuple[int, str], ...] = (
    (50, "Contributor Eligible"),
    (30, "Trusted Member"),
    (10, "Active Member"),
    (0, "New Member"),
)


@dataclass(frozen=True)
class TrustStats:
    """Engagement totals a trust score is computed from."""

    posts: int = 0
    comments: int = 0
    upvotes_received: int = 0
    downvotes_received: int = 0

    @property
    def vote_differential(self) -> int:
        return self.upvotes_received - self.downvotes_received


def compute_trust_score(stats: TrustStats, weights: Mapping[str, int] | None = None) -> int:
    """Combine ``stats`` into a score; negative totals clamp to zero."""
    weights = weights if weights is not None else settings.trust_weights
    raw = (
        stats.posts * weights["post"]
        + stats.comments * weights["comment"]
        + stats.vote_differential * weights["vote"]
    )
    return max(0, int(raw))


def _self_votes(db: Session, user_id: int) -> tuple[int, int]:
    """Return the user's own upvotes and downvotes on their live content."""
    own_posts = select(Post.id).where(
        Post.user_id == user_id,
        Post.deleted.is_(False),
        Post.status == POST_STATUS_PUBLISHED,
    )
    own_comments = select(Comment.id).where(
        Comment.user_id == user_id,
        Comment.deleted.is_(False),
    )
    rows = db.execute(
        select(Vote.vote_type, func.count(Vote.id))
        .where(
            Vote.user_id == user_id,
            or_(Vote.post_id.in_(own_posts), Vote.comment_id.in_(own_comments)),
        )
        .group_by(Vote.vote_type)
    ).all()
    counts = dict(rows)
    return counts.get("upvote", 0), counts.get("downvote", 0)


def collect_trust_stats(db: Session, user_id: int) -> TrustStats:
    """Count the user's live published content and the votes it received.

    Votes the user cast on their own content are not counted.
    """
    post_count, post_up, post_down = db.execute(
        select(
            func.count(Post.id),
            func.coalesce(func.sum(Post.upvotes), 0),
            func.coalesce(func.sum(Post.downvotes), 0),
        ).where(
            Post.user_id == user_id,
            Post.deleted.is_(False),
            Post.status == POST_STATUS_PUBLISHED,
        )
    ).one()
    comment_count, comment_up, comment_down = db.execute(
        select(
            func.count(Comment.id),
            func.coalesce(func.sum(Comment.upvotes), 0),
            func.coalesce(func.sum(Comment.downvotes), 0),
        ).where(Comment.user_id == user_id, Comment.deleted.is_(False))
    ).one()
    self_up, self_down = _self_votes(db, user_id)
    return TrustStats(
        posts=post_count,
        comments=comment_count,
        upvotes_received=max(0, post_up + comment_up - self_up),
        downvotes_received=max(0, post_down + comment_down - self_down),
    )


def recompute_trust_score(db: Session, user_id: int) -> int:
    """Recompute and store the trust score of ``user_id``.

    Recomputing twice without intervening changes stores the same value.
    Only ``trust_score`` is written.
    """
    user = db.get(User, user_id)
    if user is None:
        raise ContentNotFound("User not found")
    score = compute_trust_score(collect_trust_stats(db, user_id))
    if user.trust_score != score:
        logger.debug("Trust score for user %s: %s -> %s", user_id, user.trust_score, score)
        user.trust_score = score
        db.flush()
    return score


def is_contributor_eligible(score: int) -> bool:
    """Return True when ``score`` allows submitting a contributor application."""
    return score >= settings.contributor_trust_threshold


def points_to_eligibility(score: int) -> int:
    """Return how many points remain before contributor eligibility."""
    return max(0, settings.contributor_trust_threshold - score)


def trust_level(score: int) -> str:
    """Return the display label for ``score``."""
    for floor, label in TRUST_LEVELS:
        if score >= floor:
            return label
    return TRUST_LEVELS[-1][1]


def _recompute_in_scope(scope: SessionScope, user_id: int) -> None:
    with scope() as db:
        recompute_trust_score(db, user_id)


def defer_trust_recompute(
    background_tasks: BackgroundTasks,
    scope: SessionScope,
    user_id: int | None,
) -> None:
    """Schedule a trust recomputation to run after the response is sent."""
    if user_id is None:
        return
    background_tasks.add_task(_recompute_in_scope, scope, user_id)
