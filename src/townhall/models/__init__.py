"""SQLAlchemy models for the Townhall application."""

from .ai_schedule import AIContentSchedule
from .comment import Comment
from .contributor import ContributorApplication
from .post import Post
from .taxonomy import PostTag, Tag, Topic
from .user import User
from .vote import Vote

__all__ = [
    "AIContentSchedule",
    "Comment",
    "ContributorApplication",
    "Post",
    "PostTag", "Tag", "Topic",
    "User",
    "Vote",
]
