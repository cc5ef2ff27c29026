"""Tag and topic endpoints for the Townhall API."""

from fastapi import APIRouter, status

from townhall.schemas.taxonomy import (
    TagCreate,
    TagResponse,
    TagUpdate,
    TopicCreate,
    TopicResponse,
    TopicUpdate,
)
from townhall.services import content

from ..dependencies import OptionalActorDep, SessionDep

tags_router = APIRouter(prefix="/tags", tags=["tags"])
topics_router = APIRouter(prefix="/topics", tags=["topics"])


@tags_router.get("/", response_model=list[TagResponse])
async def list_tags(db: SessionDep) -> list[TagResponse]:
    """List all tags."""
    return [TagResponse.model_validate(tag) for tag in content.list_tags(db)]


@tags_router.post("/", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(tag_data: TagCreate, actor: OptionalActorDep, db: SessionDep) -> TagResponse:
    """Create a tag (moderators only)."""
    tag = content.create_tag(db, actor, name=tag_data.name, color=tag_data.color)
    db.commit()
    return TagResponse.model_validate(tag)


@tags_router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: int,
    tag_data: TagUpdate,
    actor: OptionalActorDep,
    db: SessionDep,
) -> TagResponse:
    """Rename or recolor a tag (moderators only)."""
    tag = content.update_tag(db, actor, tag_id, name=tag_data.name, color=tag_data.color)
    db.commit()
    return TagResponse.model_validate(tag)


@tags_router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(tag_id: int, actor: OptionalActorDep, db: SessionDep) -> None:
    """Delete a tag (moderators only)."""
    content.delete_tag(db, actor, tag_id)
    db.commit()


@topics_router.get("/", response_model=list[TopicResponse])
async def list_topics(db: SessionDep) -> list[TopicResponse]:
    """List all topics."""
    return [TopicResponse.model_validate(topic) for topic in content.list_topics(db)]


@topics_router.get("/{slug}", response_model=TopicResponse)
async def get_topic(slug: str, db: SessionDep) -> TopicResponse:
    """Get a topic by slug."""
    return TopicResponse.model_validate(content.get_topic_by_slug(db, slug))


@topics_router.post("/", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
async def create_topic(
    topic_data: TopicCreate,
    actor: OptionalActorDep,
    db: SessionDep,
) -> TopicResponse:
    """Create a topic (moderators only)."""
    topic = content.create_topic(
        db,
        actor,
        name=topic_data.name,
        slug=topic_data.slug,
        description=topic_data.description,
    )
    db.commit()
    return TopicResponse.model_validate(topic)


@topics_router.put("/{topic_id}", response_model=TopicResponse)
async def update_topic(
    topic_id: int,
    topic_data: TopicUpdate,
    actor: OptionalActorDep,
    db: SessionDep,
) -> TopicResponse:
    """Edit a topic (moderators only)."""
    topic = content.update_topic(
        db,
        actor,
        topic_id,
        name=topic_data.name,
        slug=topic_data.slug,
        description=topic_data.description,
    )
    db.commit()
    return TopicResponse.model_validate(topic)


@topics_router.delete("/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_topic(topic_id: int, actor: OptionalActorDep, db: SessionDep) -> None:
    """Delete a topic (moderators only)."""
    content.delete_topic(db, actor, topic_id)
    db.commit()
