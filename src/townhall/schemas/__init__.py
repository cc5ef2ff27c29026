"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .ai import (
    BatchGenerationRequest,
    BatchGenerationResponse,
    BatchItemResponse,
    GeneratedPost,
    GenerationRequest,
    GeneratorStatus,
    ScheduleResponse,
    ScheduleUpdate,
)
from .comment import CommentCreate, CommentResponse, CommentThread
from .contributor import ApplicationCreate, ApplicationResponse, ApplicationReview
from .post import PostCreate, PostResponse, PostUpdate
from .taxonomy import (
    TagCreate,
    TagResponse,
    TagUpdate,
    TopicCreate,
    TopicResponse,
    TopicUpdate,
)
from .user import (
    CapabilitiesResponse,
    RoleUpdate,
    TrustScoreResponse,
    UserResponse,
    VerifiedUpdate,
)
from .vote import VoteCreate, VoteResult

__all__ = [
    "BatchGenerationRequest", "BatchGenerationResponse", "BatchItemResponse",
    "GeneratedPost", "GenerationRequest", "GeneratorStatus", "ScheduleResponse", "ScheduleUpdate",
    "CommentCreate", "CommentResponse", "CommentThread",
    "ApplicationCreate", "ApplicationResponse", "ApplicationReview",
    "PostCreate", "PostResponse", "PostUpdate",
    "TagCreate", "TagResponse", "TagUpdate",
    "TopicCreate", "TopicResponse", "TopicUpdate",
    "CapabilitiesResponse", "RoleUpdate", "TrustScoreResponse", "UserResponse",
    "VerifiedUpdate",
    "VoteCreate", "VoteResult",
]
