"""Persisted schedule for AI content generation."""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from townhall.db.session import Base

SCHEDULE_ROW_ID = 1


class AIContentSchedule(Base):
    """Single-row cron configuration consumed by an external job runner."""

    __tablename__ = "ai_content_schedule"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SCHEDULE_ROW_ID)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cron_expression: Mapped[str] = mapped_column(String(128), nullable=False)
    content_type: Mapped[str] = mapped_column(String(16), nullable=False, default="educational")
