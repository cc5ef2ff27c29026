"""Business logic services for the Townhall application."""

from . import ai_content, content, trust, users, votes
from .trust import recompute_trust_score
from .votes import VoteTarget, VoteType, apply_vote

__all__ = [
    "ai_content",
    "content",
    "trust",
    "users",
    "votes",
    "apply_vote",
    "recompute_trust_score",
    "VoteTarget",
    "VoteType",
]
