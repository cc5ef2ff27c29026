"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    comments_router,
    contributors_router,
    posts_router,
    tags_router,
    topics_router,
    users_router,
    votes_router,
)

__all__ = [
    "admin_router",
    "comments_router",
    "contributors_router",
    "posts_router",
    "tags_router",
    "topics_router",
    "users_router",
    "votes_router",
]
