"""Contributor applications awaiting admin review."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from townhall.db.session import Base
from townhall.models.mixins import CreatedAtMixin

APPLICATION_PENDING = "pending"
APPLICATION_APPROVED = "approved"
APPLICATION_REJECTED = "rejected"


class ContributorApplication(CreatedAtMixin, Base):
    """Request from a user to be promoted to contributor."""

    __tablename__ = "contributor_applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    contributor_type: Mapped[str] = mapped_column(String(32), nullable=False)
    motivation: Mapped[str] = mapped_column(Text, nullable=False)
    experience: Mapped[str] = mapped_column(Text, nullable=False)
    website_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=APPLICATION_PENDING)
    # Trust score snapshot taken when the application was submitted.
    trust_score_at_submission: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reviewed_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    review_note: Mapped[str | None] = mapped_column(Text, nullable=True)
