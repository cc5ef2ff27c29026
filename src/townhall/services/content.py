"""Permission-gated CRUD for posts, comments, tags and topics.

Each mutation authorizes the actor before touching the session, so a denied
request leaves no partial writes behind. Functions flush but never commit;
the API layer owns the transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from townhall.auth.guard import authorize, authorize_owner_or, require_authenticated
from townhall.auth.permissions import Permission, permissions_for
from townhall.auth.roles import resolve_role
from townhall.core.errors import (
    ContentNotFound,
    DuplicateName,
    InvalidCommentParent,
    UnknownTag,
)
from townhall.models import Comment, Post, PostTag, Tag, Topic
from townhall.models.post import POST_STATUS_PENDING, POST_STATUS_PUBLISHED

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def get_post(db: Session, post_id: int, *, include_pending: bool = False) -> Post:
    """Return a live post or raise ``ContentNotFound``."""
    stmt = select(Post).where(Post.id == post_id, Post.deleted.is_(False))
    if not include_pending:
        stmt = stmt.where(Post.status == POST_STATUS_PUBLISHED)
    post = db.execute(stmt).scalar_one_or_none()
    if post is None:
        raise ContentNotFound("Post not found")
    return post


def list_posts(
    db: Session,
    *,
    limit: int = 20,
    offset: int = 0,
    tag: str | None = None,
    topic_slug: str | None = None,
) -> list[Post]:
    """List published posts, newest first."""
    stmt = select(Post).where(Post.deleted.is_(False), Post.status == POST_STATUS_PUBLISHED)
    if tag is not None:
        stmt = stmt.join(PostTag, PostTag.post_id == Post.id).join(Tag, Tag.id == PostTag.tag_id)
        stmt = stmt.where(Tag.name == tag)
    if topic_slug is not None:
        stmt = stmt.join(Topic, Topic.id == Post.topic_id).where(Topic.slug == topic_slug)
    stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc()).offset(offset).limit(limit)
    return list(db.execute(stmt).scalars())


def list_pending_posts(db: Session, actor: Any | None) -> list[Post]:
    """List posts waiting for moderation."""
    authorize(actor, Permission.MODERATE_CONTENT)
    stmt = (
        select(Post)
        .where(Post.deleted.is_(False), Post.status == POST_STATUS_PENDING)
        .order_by(Post.id)
    )
    return list(db.execute(stmt).scalars())


def post_tags(db: Session, post_id: int) -> list[Tag]:
    """Return the tags attached to a post, ordered by name."""
    stmt = (
        select(Tag)
        .join(PostTag, PostTag.tag_id == Tag.id)
        .where(PostTag.post_id == post_id)
        .order_by(Tag.name)
    )
    return list(db.execute(stmt).scalars())


def _resolve_tags(db: Session, names: Iterable[str], *, create_missing: bool) -> list[Tag]:
    tags: list[Tag] = []
    seen: set[str] = set()
    for raw in names:
        name = raw.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        tag = db.execute(select(Tag).where(Tag.name == name)).scalar_one_or_none()
        if tag is None:
            if not create_missing:
                raise UnknownTag(f"Unknown tag: {name}")
            tag = Tag(name=name)
            db.add(tag)
            db.flush()
        tags.append(tag)
    return tags


def _attach_tags(db: Session, post: Post, tags: Iterable[Tag]) -> None:
    for tag in tags:
        db.add(PostTag(post_id=post.id, tag_id=tag.id))


def _check_topic(db: Session, topic_id: int | None) -> None:
    if topic_id is not None and db.get(Topic, topic_id) is None:
        raise ContentNotFound("Topic not found")


def create_post(
    db: Session,
    actor: Any | None,
    *,
    title: str,
    content: str,
    image_url: str | None = None,
    topic_id: int | None = None,
    tags: Iterable[str] = (),
    is_ai_generated: bool = False,
) -> Post:
    """Create a post owned by ``actor``.

    Roles with ``auto_publish:post`` publish immediately; other posts wait in
    the moderation queue. Tags must already exist unless the actor may
    moderate content, in which case missing tags are created.
    """
    authorize(actor, Permission.CREATE_POST)
    granted = permissions_for(resolve_role(actor))
    _check_topic(db, topic_id)
    resolved_tags = _resolve_tags(
        db,
        tags,
        create_missing=Permission.MODERATE_CONTENT in granted,
    )

    post = Post(
        user_id=actor.id,
        title=title,
        content=content,
        image_url=image_url,
        topic_id=topic_id,
        is_ai_generated=is_ai_generated,
        status=(
            POST_STATUS_PUBLISHED
            if Permission.AUTO_PUBLISH_POST in granted
            else POST_STATUS_PENDING
        ),
    )
    db.add(post)
    db.flush()
    _attach_tags(db, post, resolved_tags)
    db.flush()
    return post


def approve_post(db: Session, actor: Any | None, post_id: int) -> Post:
    """Publish a pending post."""
    authorize(actor, Permission.MODERATE_CONTENT)
    post = get_post(db, post_id, include_pending=True)
    post.status = POST_STATUS_PUBLISHED
    db.flush()
    return post


def update_post(
    db: Session,
    actor: Any | None,
    post_id: int,
    *,
    title: str | None = None,
    content: str | None = None,
    image_url: str | None = _UNSET,
    topic_id: int | None = _UNSET,
) -> Post:
    """Edit a post; owners may edit their own, others need ``edit:any_post``."""
    require_authenticated(actor)
    post = get_post(db, post_id, include_pending=True)
    authorize_owner_or(actor, post.user_id, Permission.EDIT_ANY_POST)
    if title is not None:
        post.title = title
    if content is not None:
        post.content = content
    if image_url is not _UNSET:
        post.image_url = image_url
    if topic_id is not _UNSET:
        _check_topic(db, topic_id)
        post.topic_id = topic_id
    db.flush()
    return post


def delete_post(db: Session, actor: Any | None, post_id: int) -> Post:
    """Soft-delete a post together with all of its comments."""
    require_authenticated(actor)
    post = get_post(db, post_id, include_pending=True)
    authorize_owner_or(actor, post.user_id, Permission.DELETE_ANY_POST)
    post.deleted = True
    db.execute(
        update(Comment)
        .where(Comment.post_id == post.id, Comment.deleted.is_(False))
        .values(deleted=True)
        .execution_options(synchronize_session="fetch")
    )
    post.comment_count = 0
    db.flush()
    logger.info("Post %s deleted by user %s", post.id, actor.id)
    return post


def get_comment(db: Session, comment_id: int) -> Comment:
    """Return a live comment or raise ``ContentNotFound``."""
    comment = db.execute(
        select(Comment).where(Comment.id == comment_id, Comment.deleted.is_(False))
    ).scalar_one_or_none()
    if comment is None:
        raise ContentNotFound("Comment not found")
    return comment


def _refresh_comment_count(db: Session, post: Post) -> None:
    db.flush()
    post.comment_count = db.execute(
        select(func.count(Comment.id)).where(
            Comment.post_id == post.id,
            Comment.deleted.is_(False),
        )
    ).scalar_one()


def create_comment(
    db: Session,
    actor: Any | None,
    post_id: int,
    *,
    content: str,
    parent_id: int | None = None,
) -> Comment:
    """Add a comment, or a reply when ``parent_id`` is given."""
    authorize(actor, Permission.CREATE_COMMENT)
    post = get_post(db, post_id)
    if parent_id is not None:
        parent = db.get(Comment, parent_id)
        if parent is None or parent.deleted or parent.post_id != post.id:
            raise InvalidCommentParent()

    comment = Comment(post_id=post.id, user_id=actor.id, content=content, parent_id=parent_id)
    db.add(comment)
    _refresh_comment_count(db, post)
    db.flush()
    return comment


def _descendant_ids(db: Session, comment_id: int) -> list[int]:
    found: list[int] = []
    frontier = [comment_id]
    while frontier:
        frontier = list(
            db.execute(
                select(Comment.id).where(
                    Comment.parent_id.in_(frontier),
                    Comment.deleted.is_(False),
                )
            ).scalars()
        )
        found.extend(frontier)
    return found


def delete_comment(db: Session, actor: Any | None, comment_id: int) -> Comment:
    """Soft-delete a comment and every reply beneath it; owners or moderators only."""
    require_authenticated(actor)
    comment = get_comment(db, comment_id)
    authorize_owner_or(actor, comment.user_id, Permission.MODERATE_CONTENT)
    comment.deleted = True
    replies = _descendant_ids(db, comment.id)
    if replies:
        db.execute(
            update(Comment)
            .where(Comment.id.in_(replies))
            .values(deleted=True)
            .execution_options(synchronize_session="fetch")
        )
    post = db.get(Post, comment.post_id)
    if post is not None:
        _refresh_comment_count(db, post)
    db.flush()
    return comment


@dataclass
class CommentNode:
    """A comment together with its live replies."""

    comment: Comment
    replies: list[CommentNode] = field(default_factory=list)


def list_comments(db: Session, post_id: int) -> list[CommentNode]:
    """Return the post's live comments as a reply tree, oldest first."""
    post = get_post(db, post_id)
    comments = db.execute(
        select(Comment)
        .where(Comment.post_id == post.id, Comment.deleted.is_(False))
        .order_by(Comment.created_at, Comment.id)
    ).scalars()

    nodes: dict[int, CommentNode] = {}
    roots: list[CommentNode] = []
    for comment in comments:
        nodes[comment.id] = CommentNode(comment)
    for node in nodes.values():
        parent = nodes.get(node.comment.parent_id) if node.comment.parent_id else None
        if parent is not None:
            parent.replies.append(node)
        elif node.comment.parent_id is None:
            roots.append(node)
    return roots


def list_tags(db: Session) -> list[Tag]:
    """Return every tag ordered by name."""
    return list(db.execute(select(Tag).order_by(Tag.name)).scalars())


def _get_tag(db: Session, tag_id: int) -> Tag:
    tag = db.get(Tag, tag_id)
    if tag is None:
        raise ContentNotFound("Tag not found")
    return tag


def _ensure_tag_name_free(db: Session, name: str, *, exclude_id: int | None = None) -> None:
    stmt = select(Tag.id).where(Tag.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Tag.id != exclude_id)
    if db.execute(stmt).first() is not None:
        raise DuplicateName("Tag already exists")


def create_tag(db: Session, actor: Any | None, *, name: str, color: str | None = None) -> Tag:
    """Create a tag with a unique name."""
    authorize(actor, Permission.MODERATE_CONTENT)
    _ensure_tag_name_free(db, name)
    tag = Tag(name=name, color=color)
    db.add(tag)
    db.flush()
    return tag


def update_tag(
    db: Session,
    actor: Any | None,
    tag_id: int,
    *,
    name: str | None = None,
    color: str | None = None,
) -> Tag:
    """Rename or recolor a tag."""
    authorize(actor, Permission.MODERATE_CONTENT)
    tag = _get_tag(db, tag_id)
    if name is not None and name != tag.name:
        _ensure_tag_name_free(db, name, exclude_id=tag.id)
        tag.name = name
    if color is not None:
        tag.color = color
    db.flush()
    return tag


def delete_tag(db: Session, actor: Any | None, tag_id: int) -> None:
    """Delete a tag and detach it from every post."""
    authorize(actor, Permission.MODERATE_CONTENT)
    tag = _get_tag(db, tag_id)
    db.execute(delete(PostTag).where(PostTag.tag_id == tag.id))
    db.delete(tag)
    db.flush()


def list_topics(db: Session) -> list[Topic]:
    """Return every topic ordered by name."""
    return list(db.execute(select(Topic).order_by(Topic.name)).scalars())


def get_topic_by_slug(db: Session, slug: str) -> Topic:
    """Return a topic by slug or raise ``ContentNotFound``."""
    topic = db.execute(select(Topic).where(Topic.slug == slug)).scalar_one_or_none()
    if topic is None:
        raise ContentNotFound("Topic not found")
    return topic


def _get_topic(db: Session, topic_id: int) -> Topic:
    topic = db.get(Topic, topic_id)
    if topic is None:
        raise ContentNotFound("Topic not found")
    return topic


def _ensure_slug_free(db: Session, slug: str, *, exclude_id: int | None = None) -> None:
    stmt = select(Topic.id).where(Topic.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Topic.id != exclude_id)
    if db.execute(stmt).first() is not None:
        raise DuplicateName("Topic slug already exists")


def create_topic(
    db: Session,
    actor: Any | None,
    *,
    name: str,
    slug: str,
    description: str | None = None,
) -> Topic:
    """Create a topic with a unique slug."""
    authorize(actor, Permission.MODERATE_CONTENT)
    _ensure_slug_free(db, slug)
    topic = Topic(name=name, slug=slug, description=description)
    db.add(topic)
    db.flush()
    return topic


def update_topic(
    db: Session,
    actor: Any | None,
    topic_id: int,
    *,
    name: str | None = None,
    slug: str | None = None,
    description: str | None = None,
) -> Topic:
    """Edit a topic."""
    authorize(actor, Permission.MODERATE_CONTENT)
    topic = _get_topic(db, topic_id)
    if slug is not None and slug != topic.slug:
        _ensure_slug_free(db, slug, exclude_id=topic.id)
        topic.slug = slug
    if name is not None:
        topic.name = name
    if description is not None:
        topic.description = description
    db.flush()
    return topic


def delete_topic(db: Session, actor: Any | None, topic_id: int) -> None:
    """Delete a topic; its posts stay but lose the association."""
    authorize(actor, Permission.MODERATE_CONTENT)
    topic = _get_topic(db, topic_id)
    db.execute(
        update(Post)
        .where(Post.topic_id == topic.id)
        .values(topic_id=None)
        .execution_options(synchronize_session="fetch")
    )
    db.delete(topic)
    db.flush()
