"""Shared API dependencies for authentication and common functionality."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from townhall.auth.guard import authorize, has_role
from townhall.auth.permissions import Permission, Role
from townhall.core.errors import Unauthenticated
from townhall.core.security import decode_subject
from townhall.db.session import SessionScope, get_db, get_session_scope
from townhall.models import User
from townhall.services.ai_content import ContentGenerator, HttpContentGenerator

# Missing credentials are allowed through so anonymous actors resolve to guests.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
ScopeDep = Annotated[SessionScope, Depends(get_session_scope)]


def get_optional_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Return the authenticated user, or None for anonymous requests.

    Raises:
        HTTPException: If a token is present but invalid or names no user.
    """
    if credentials is None:
        return None
    user_id = decode_subject(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


OptionalActorDep = Annotated[User | None, Depends(get_optional_actor)]


def get_current_actor(actor: OptionalActorDep) -> User:
    """Return the authenticated user or reject the request."""
    if actor is None:
        raise Unauthenticated()
    return actor


CurrentActorDep = Annotated[User, Depends(get_current_actor)]


def require_permission(permission: Permission) -> Callable[[User | None], User]:
    """Build a dependency that lets only holders of ``permission`` through."""

    def _dependency(actor: OptionalActorDep) -> User:
        authorize(actor, permission)
        return actor  # type: ignore[return-value]

    return _dependency


def require_roles(*roles: Role) -> Callable[[User | None], User]:
    """Build a dependency that lets only the listed roles through."""

    def _dependency(actor: OptionalActorDep) -> User:
        has_role(actor, roles)
        return actor  # type: ignore[return-value]

    return _dependency


def get_content_generator() -> ContentGenerator:
    """Return the external AI content generator client."""
    return HttpContentGenerator()


GeneratorDep = Annotated[ContentGenerator, Depends(get_content_generator)]
