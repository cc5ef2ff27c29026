"""SQLAlchemy models for comments on posts."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from townhall.db.session import Base
from townhall.models.mixins import CreatedAtMixin


class Comment(CreatedAtMixin, Base):
    """Comment on a post, optionally replying to another comment."""

    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_comments_upvotes_non_negative"),
        CheckConstraint("downvotes >= 0", name="ck_comments_downvotes_non_negative"),
        Index("ix_comments_post_id", "post_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    # Must reference a comment on the same post; enforced by the content service.
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.id"),
        nullable=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)
    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    deleted: Mapped[bool] = mapped_column(default=False, nullable=False)
