"""SQLAlchemy models for user accounts."""

from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from townhall.db.session import Base
from townhall.models.mixins import CreatedAtMixin


class User(CreatedAtMixin, Base):
    """Registered account and its role assignment.

    ``role`` is the canonical authorization field. ``is_admin`` predates it and
    is only read for records whose role is empty.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("trust_score >= 0", name="ck_users_trust_score_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    role: Mapped[str | None] = mapped_column(String(32), nullable=True, default="user")
    contributor_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    trust_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Deprecated: derived from role on every write.
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
