"""Domain exceptions raised by the service layer.

Each exception carries the HTTP status and the public ``detail`` used when the
request boundary turns it into a rejection. None of these are transient, so
none of them are retried.
"""

from __future__ import annotations

from fastapi import status


class TownhallError(Exception):
    """Base class for every rejection raised by Townhall services."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "Request rejected"

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class AuthError(TownhallError):
    """Base exception for authorization failures."""


class Unauthenticated(AuthError):
    """Raised when an action needs an identity and none was supplied."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Authentication required"


class InsufficientPermission(AuthError):
    """Raised when the actor's role lacks the requested permission.

    The permission name stays on the exception for logging; the public detail
    never mentions it.
    """

    status_code = status.HTTP_403_FORBIDDEN
    detail = "Insufficient permissions"

    def __init__(self, permission: str | None = None, role: str | None = None) -> None:
        self.permission = permission
        self.role = role
        super().__init__()


class InvalidVoteTarget(TownhallError):
    """Raised when a vote names neither or both of a post and a comment."""

    detail = "Invalid vote target"


class VoteTargetNotFound(InvalidVoteTarget):
    """Raised when the vote target does not exist or was deleted."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Vote target not found"


class ContentNotFound(TownhallError):
    """Raised when a post, comment, tag, topic or user cannot be found."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class DuplicateName(TownhallError):
    """Raised when a tag name or topic slug is already taken."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Name already exists"


class InvalidCommentParent(TownhallError):
    """Raised when a reply points at a comment on another post."""

    detail = "Parent comment must belong to the same post"


class UnknownTag(TownhallError):
    """Raised when a post references a tag that has not been created."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    detail = "Unknown tag"


class NotEligible(TownhallError):
    """Raised when a contributor application does not meet the requirements."""

    status_code = status.HTTP_403_FORBIDDEN
    detail = "Not eligible to apply"


class InvalidSchedule(TownhallError):
    """Raised for malformed cron expressions."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    detail = "Invalid cron expression"


class GenerationFailed(TownhallError):
    """Raised when the external content generator fails or is unavailable."""

    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "Failed to generate post"
