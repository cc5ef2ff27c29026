"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RoleName = Literal["superadmin", "admin", "contributor", "user"]
ContributorTypeName = Literal["surgeon", "patient", "influencer", "blogger"]


class UserResponse(BaseModel):
    """Public view of a user account."""

    id: int
    username: str
    avatar_url: str | None = None
    role: str | None
    contributor_type: str | None
    verified: bool
    trust_score: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CapabilitiesResponse(BaseModel):
    """The caller's account with the capabilities derived from its role."""

    user: UserResponse
    effective_role: str
    permissions: list[str]
    is_super_admin: bool
    is_admin_or_above: bool
    is_contributor_or_above: bool
    trust_level: str
    contributor_eligible: bool
    points_to_eligibility: int


class RoleUpdate(BaseModel):
    """Role assignment requested by a superadmin."""

    role: RoleName
    contributor_type: ContributorTypeName | None = None


class VerifiedUpdate(BaseModel):
    """Verification flag update."""

    verified: bool


class TrustScoreResponse(BaseModel):
    """Result of a trust score recomputation."""

    user_id: int
    trust_score: int
    trust_level: str
    contributor_eligible: bool = Field(..., description="Advisory only; never grants a role")
