"""SQLAlchemy models for posts."""

from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from townhall.db.session import Base
from townhall.models.mixins import CreatedAtMixin

POST_STATUS_PUBLISHED = "published"
POST_STATUS_PENDING = "pending"


class Post(CreatedAtMixin, Base):
    """Primary content entity produced by users.

    Vote and comment counters are denormalized; the vote aggregator and the
    content service keep them in step with the ``votes`` and ``comments``
    tables.
    """

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_posts_upvotes_non_negative"),
        CheckConstraint("downvotes >= 0", name="ck_posts_downvotes_non_negative"),
        CheckConstraint("comment_count >= 0", name="ck_posts_comment_count_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    topic_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("topics.id", ondelete="SET NULL"),
        nullable=True,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    comment_count: Mapped[int] = mapped_column(default=0, nullable=False)

    is_ai_generated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # "published" posts are listed; "pending" ones wait for a moderator.
    status: Mapped[str] = mapped_column(String(16), default=POST_STATUS_PUBLISHED, nullable=False)
    deleted: Mapped[bool] = mapped_column(default=False, nullable=False)
