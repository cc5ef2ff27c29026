"""Admin AI content tool endpoints."""

from fastapi import APIRouter, status

from townhall.schemas.ai import (
    BatchGenerationRequest,
    BatchGenerationResponse,
    BatchItemResponse,
    GenerationRequest,
    GeneratorStatus,
    ScheduleResponse,
    ScheduleUpdate,
)
from townhall.schemas.post import PostResponse
from townhall.services import ai_content

from ..dependencies import GeneratorDep, OptionalActorDep, SessionDep
from .posts import to_post_response

router = APIRouter(prefix="/admin/ai", tags=["admin"])


@router.get("/status", response_model=GeneratorStatus)
async def get_generator_status(actor: OptionalActorDep, generator: GeneratorDep) -> GeneratorStatus:
    """Report whether the external generator is configured."""
    return GeneratorStatus(configured=ai_content.generator_status(actor, generator))


@router.post("/generate", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def generate_post(
    request: GenerationRequest,
    actor: OptionalActorDep,
    db: SessionDep,
    generator: GeneratorDep,
) -> PostResponse:
    """Generate a post with the external AI service and publish it."""
    post = await ai_content.generate_post(db, actor, request, generator)
    db.commit()
    return to_post_response(db, post)


@router.post("/generate-batch", response_model=BatchGenerationResponse)
async def generate_batch(
    batch: BatchGenerationRequest,
    actor: OptionalActorDep,
    db: SessionDep,
    generator: GeneratorDep,
) -> BatchGenerationResponse:
    """Generate several posts; failed items are reported, not fatal."""
    results = await ai_content.generate_batch(db, actor, batch.requests, generator)
    db.commit()
    items = [
        BatchItemResponse(
            index=item.index,
            post=to_post_response(db, item.post) if item.post is not None else None,
            error=item.error,
        )
        for item in results
    ]
    created = sum(1 for item in results if item.post is not None)
    return BatchGenerationResponse(created=created, failed=len(items) - created, items=items)


@router.get("/schedule", response_model=ScheduleResponse)
async def get_schedule(actor: OptionalActorDep, db: SessionDep) -> ScheduleResponse:
    """Return the generation schedule."""
    schedule = ai_content.get_schedule(db, actor)
    db.commit()
    return ScheduleResponse.model_validate(schedule)


@router.put("/schedule", response_model=ScheduleResponse)
async def update_schedule(
    schedule_data: ScheduleUpdate,
    actor: OptionalActorDep,
    db: SessionDep,
) -> ScheduleResponse:
    """Update the generation schedule consumed by the external job runner."""
    schedule = ai_content.update_schedule(
        db,
        actor,
        enabled=schedule_data.enabled,
        cron_expression=schedule_data.cron_expression,
        content_type=schedule_data.content_type,
    )
    db.commit()
    return ScheduleResponse.model_validate(schedule)
