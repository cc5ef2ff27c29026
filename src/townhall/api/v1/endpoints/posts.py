"""Post and comment endpoints for the Townhall API."""

from fastapi import APIRouter, BackgroundTasks, Query, status
from sqlalchemy.orm import Session

from townhall.models import Post
from townhall.schemas.comment import CommentCreate, CommentResponse, CommentThread
from townhall.schemas.post import PostCreate, PostResponse, PostUpdate, TagSummary
from townhall.services import content
from townhall.services.content import CommentNode
from townhall.services.trust import defer_trust_recompute

from ..dependencies import OptionalActorDep, ScopeDep, SessionDep

router = APIRouter(prefix="/posts", tags=["posts"])
comments_router = APIRouter(prefix="/comments", tags=["comments"])


def to_post_response(db: Session, post: Post) -> PostResponse:
    """Serialize a post together with its tags."""
    tags = [TagSummary.model_validate(tag) for tag in content.post_tags(db, post.id)]
    return PostResponse.model_validate(post).model_copy(update={"tags": tags})


def _to_thread(node: CommentNode) -> CommentThread:
    thread = CommentThread.model_validate(node.comment)
    thread.replies = [_to_thread(child) for child in node.replies]
    return thread


@router.get("/", response_model=list[PostResponse])
async def list_posts(
    db: SessionDep,
    limit: int = Query(20, ge=1, le=100, description="Maximum number of posts to return"),
    offset: int = Query(0, ge=0),
    tag: str | None = Query(None, description="Filter by tag name"),
    topic: str | None = Query(None, description="Filter by topic slug"),
) -> list[PostResponse]:
    """List published posts, newest first."""
    posts = content.list_posts(db, limit=limit, offset=offset, tag=tag, topic_slug=topic)
    return [to_post_response(db, post) for post in posts]


@router.get("/pending", response_model=list[PostResponse])
async def list_pending_posts(actor: OptionalActorDep, db: SessionDep) -> list[PostResponse]:
    """List posts waiting for moderator approval."""
    return [to_post_response(db, post) for post in content.list_pending_posts(db, actor)]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: SessionDep) -> PostResponse:
    """Get a specific published post by ID."""
    return to_post_response(db, content.get_post(db, post_id))


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    actor: OptionalActorDep,
    db: SessionDep,
    scope: ScopeDep,
    background_tasks: BackgroundTasks,
) -> PostResponse:
    """Create a post; it is published immediately only for trusted roles."""
    post = content.create_post(
        db,
        actor,
        title=post_data.title,
        content=post_data.content,
        image_url=post_data.image_url,
        topic_id=post_data.topic_id,
        tags=post_data.tags,
    )
    db.commit()
    defer_trust_recompute(background_tasks, scope, post.user_id)
    return to_post_response(db, post)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    actor: OptionalActorDep,
    db: SessionDep,
) -> PostResponse:
    """Edit a post owned by the caller, or any post with edit rights."""
    post = content.update_post(db, actor, post_id, **post_data.model_dump(exclude_unset=True))
    db.commit()
    return to_post_response(db, post)


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    actor: OptionalActorDep,
    db: SessionDep,
    scope: ScopeDep,
    background_tasks: BackgroundTasks,
) -> dict[str, str]:
    """Delete a post and its comments."""
    post = content.delete_post(db, actor, post_id)
    db.commit()
    defer_trust_recompute(background_tasks, scope, post.user_id)
    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/approve", response_model=PostResponse)
async def approve_post(
    post_id: int,
    actor: OptionalActorDep,
    db: SessionDep,
    scope: ScopeDep,
    background_tasks: BackgroundTasks,
) -> PostResponse:
    """Publish a pending post."""
    post = content.approve_post(db, actor, post_id)
    db.commit()
    defer_trust_recompute(background_tasks, scope, post.user_id)
    return to_post_response(db, post)


@router.get("/{post_id}/comments", response_model=list[CommentThread])
async def list_comments(post_id: int, db: SessionDep) -> list[CommentThread]:
    """Return the comment tree of a post."""
    return [_to_thread(node) for node in content.list_comments(db, post_id)]


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    actor: OptionalActorDep,
    db: SessionDep,
    scope: ScopeDep,
    background_tasks: BackgroundTasks,
) -> CommentResponse:
    """Comment on a post or reply to one of its comments."""
    comment = content.create_comment(
        db,
        actor,
        post_id,
        content=comment_data.content,
        parent_id=comment_data.parent_id,
    )
    db.commit()
    defer_trust_recompute(background_tasks, scope, comment.user_id)
    return CommentResponse.model_validate(comment)


@comments_router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    actor: OptionalActorDep,
    db: SessionDep,
    scope: ScopeDep,
    background_tasks: BackgroundTasks,
) -> dict[str, str]:
    """Delete a comment owned by the caller, or any comment as a moderator."""
    comment = content.delete_comment(db, actor, comment_id)
    db.commit()
    defer_trust_recompute(background_tasks, scope, comment.user_id)
    return {"message": "Comment deleted successfully"}
