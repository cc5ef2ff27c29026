"""Contributor application endpoints for the Townhall API."""

from fastapi import APIRouter, Query, status

from townhall.schemas.contributor import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationReview,
)
from townhall.services import users as user_service

from ..dependencies import OptionalActorDep, SessionDep

router = APIRouter(prefix="/contributors", tags=["contributors"])


@router.post(
    "/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    application_data: ApplicationCreate,
    actor: OptionalActorDep,
    db: SessionDep,
) -> ApplicationResponse:
    """Apply for the contributor role once the trust threshold is reached."""
    application = user_service.submit_application(
        db,
        actor,
        contributor_type=application_data.contributor_type,
        motivation=application_data.motivation,
        experience=application_data.experience,
        website_url=application_data.website_url,
    )
    db.commit()
    return ApplicationResponse.model_validate(application)


@router.get("/applications", response_model=list[ApplicationResponse])
async def list_applications(
    actor: OptionalActorDep,
    db: SessionDep,
    status_filter: str | None = Query("pending", alias="status"),
) -> list[ApplicationResponse]:
    """List contributor applications (admins only)."""
    return [
        ApplicationResponse.model_validate(application)
        for application in user_service.list_applications(db, actor, status_filter)
    ]


@router.post("/applications/{application_id}/review", response_model=ApplicationResponse)
async def review_application(
    application_id: int,
    review: ApplicationReview,
    actor: OptionalActorDep,
    db: SessionDep,
) -> ApplicationResponse:
    """Approve or reject an application (admins only)."""
    application = user_service.review_application(
        db,
        actor,
        application_id,
        approve=review.approve,
        note=review.note,
    )
    db.commit()
    return ApplicationResponse.model_validate(application)
