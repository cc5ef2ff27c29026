"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for adding a comment or reply."""

    content: str = Field(..., min_length=1, max_length=10000)
    parent_id: int | None = Field(None, description="Comment being replied to")


class CommentResponse(BaseModel):
    """Schema for a single comment."""

    id: int
    post_id: int
    user_id: int
    parent_id: int | None
    content: str
    upvotes: int
    downvotes: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentThread(CommentResponse):
    """Comment with its nested replies."""

    replies: list[CommentThread] = Field(default_factory=list)
