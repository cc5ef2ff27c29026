"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1, description="Markdown content")
    image_url: str | None = None
    topic_id: int | None = Field(None, description="Topic the post belongs to")
    tags: list[str] = Field(default_factory=list, description="Names of existing tags")


class PostUpdate(BaseModel):
    """Partial update of a post; omitted fields are left untouched."""

    title: str | None = Field(None, min_length=1, max_length=300)
    content: str | None = Field(None, min_length=1)
    image_url: str | None = None
    topic_id: int | None = None


class TagSummary(BaseModel):
    """Tag as embedded in post responses."""

    id: int
    name: str
    color: str | None = None

    model_config = ConfigDict(from_attributes=True)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    user_id: int
    topic_id: int | None
    title: str
    content: str
    image_url: str | None
    upvotes: int
    downvotes: int
    comment_count: int
    is_ai_generated: bool
    status: str
    created_at: datetime
    tags: list[TagSummary] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
