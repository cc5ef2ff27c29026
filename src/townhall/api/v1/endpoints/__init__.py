"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .contributors import router as contributors_router
from .posts import comments_router
from .posts import router as posts_router
from .taxonomy import tags_router, topics_router
from .users import router as users_router
from .votes import router as votes_router

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
