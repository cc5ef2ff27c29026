"""Models capturing votes on posts and comments."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from townhall.db.session import Base


class Vote(Base):
    """Per-user vote on exactly one post or comment."""

    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint(
            "vote_type IN ('upvote', 'downvote')",
            name="ck_votes_vote_type",
        ),
        CheckConstraint(
            "(post_id IS NULL) <> (comment_id IS NULL)",
            name="ck_votes_single_target",
        ),
        # One vote per user and target; a repeat vote updates or removes this row.
        UniqueConstraint("user_id", "post_id", name="uq_votes_user_post"),
        UniqueConstraint("user_id", "comment_id", name="uq_votes_user_comment"),
        Index("ix_votes_post_id", "post_id"),
        Index("ix_votes_comment_id", "comment_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=True,
    )
    comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )
    vote_type: Mapped[str] = mapped_column(String(8), nullable=False)
