"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for casting a vote on a post or a comment.

    Exactly one of ``post_id`` and ``comment_id`` must be set; the vote
    service rejects anything else as an invalid target.
    """

    post_id: int | None = None
    comment_id: int | None = None
    vote_type: Literal["upvote", "downvote"] = Field(..., description="upvote or downvote")


class VoteResult(BaseModel):
    """Counters of the voted target after the vote was applied."""

    upvotes: int
    downvotes: int
    vote_type: Literal["upvote", "downvote"] | None = None
