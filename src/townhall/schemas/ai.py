"""Schemas for the AI content generation tool."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from townhall.schemas.post import PostResponse


class GenerationRequest(BaseModel):
    """Prompt sent to the external content generator."""

    prompt: str = Field(..., min_length=1, description="What the post should cover")
    content_type: Literal["personal", "educational"] = "educational"
    topic_id: int | None = None


class GeneratedPost(BaseModel):
    """Draft returned by the content generator."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)


class ScheduleUpdate(BaseModel):
    """Requested changes to the generation schedule."""

    enabled: bool
    cron_expression: str | None = Field(None, description="Five-field cron string")
    content_type: Literal["personal", "educational"] | None = None


class ScheduleResponse(BaseModel):
    """Current generation schedule."""

    enabled: bool
    cron_expression: str
    content_type: str

    model_config = ConfigDict(from_attributes=True)


class BatchGenerationRequest(BaseModel):
    """Several generation requests processed one after another."""

    requests: list[GenerationRequest] = Field(..., min_length=1, max_length=20)


class BatchItemResponse(BaseModel):
    """Result of one batch item: the created post or the failure detail."""

    index: int
    post: PostResponse | None = None
    error: str | None = None


class BatchGenerationResponse(BaseModel):
    """Per-item outcome of a batch generation."""

    created: int
    failed: int
    items: list[BatchItemResponse]


class GeneratorStatus(BaseModel):
    """Whether the external content generator can be reached."""

    configured: bool
