"""Tag and topic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class TagCreate(BaseModel):
    """Schema for creating a tag."""

    name: str = Field(..., min_length=1, max_length=64)
    color: str | None = Field(None, max_length=32)


class TagUpdate(BaseModel):
    """Schema for renaming or recoloring a tag."""

    name: str | None = Field(None, min_length=1, max_length=64)
    color: str | None = Field(None, max_length=32)


class TagResponse(BaseModel):
    """Tag returned by the API."""

    id: int
    name: str
    color: str | None

    model_config = ConfigDict(from_attributes=True)


class TopicCreate(BaseModel):
    """Schema for creating a topic."""

    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, max_length=96, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: str | None = None


class TopicUpdate(BaseModel):
    """Schema for editing a topic."""

    name: str | None = Field(None, min_length=1)
    slug: str | None = Field(
        None,
        min_length=1,
        max_length=96,
        pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$",
    )
    description: str | None = None


class TopicResponse(BaseModel):
    """Topic returned by the API."""

    id: int
    name: str
    slug: str
    description: str | None

    model_config = ConfigDict(from_attributes=True)
