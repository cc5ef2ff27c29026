"""Contributor application schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from townhall.schemas.user import ContributorTypeName


class ApplicationCreate(BaseModel):
    """Contributor application submitted by an eligible user."""

    contributor_type: ContributorTypeName
    motivation: str = Field(..., min_length=200)
    experience: str = Field(..., min_length=100)
    website_url: str | None = None


class ApplicationReview(BaseModel):
    """Admin decision on an application."""

    approve: bool
    note: str | None = None


class ApplicationResponse(BaseModel):
    """Contributor application returned by the API."""

    id: int
    user_id: int
    contributor_type: str
    motivation: str
    experience: str
    website_url: str | None
    status: str
    trust_score_at_submission: int
    reviewed_by: int | None
    reviewed_at: datetime | None
    review_note: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
