"""User, role and trust endpoints for the Townhall API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from townhall.auth.permissions import Role
from townhall.auth.roles import role_flags
from townhall.models import User
from townhall.schemas.user import (
    CapabilitiesResponse,
    RoleUpdate,
    TrustScoreResponse,
    UserResponse,
    VerifiedUpdate,
)
from townhall.services import users as user_service
from townhall.services.trust import (
    is_contributor_eligible,
    points_to_eligibility,
    recompute_trust_score,
    trust_level,
)

from ..dependencies import CurrentActorDep, OptionalActorDep, SessionDep, require_roles

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=CapabilitiesResponse)
async def read_me(actor: CurrentActorDep) -> CapabilitiesResponse:
    """Return the caller's account and what its role allows."""
    flags = role_flags(actor)
    return CapabilitiesResponse(
        user=UserResponse.model_validate(actor),
        effective_role=flags.effective_role,
        permissions=sorted(p.value for p in flags.permissions),
        is_super_admin=flags.is_super_admin,
        is_admin_or_above=flags.is_admin_or_above,
        is_contributor_or_above=flags.is_contributor_or_above,
        trust_level=trust_level(actor.trust_score),
        contributor_eligible=is_contributor_eligible(actor.trust_score),
        points_to_eligibility=points_to_eligibility(actor.trust_score),
    )


@router.get("/", response_model=list[UserResponse])
async def list_users(
    actor: OptionalActorDep,
    db: SessionDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
) -> list[UserResponse]:
    """List accounts (user managers only)."""
    return [
        UserResponse.model_validate(user)
        for user in user_service.get_users(db, actor, skip=skip, limit=limit)
    ]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: SessionDep) -> UserResponse:
    """Get a user's public profile."""
    return UserResponse.model_validate(user_service.get_user(db, user_id))


@router.put("/{user_id}/role", response_model=UserResponse)
async def update_role(
    user_id: int,
    role_data: RoleUpdate,
    actor: OptionalActorDep,
    db: SessionDep,
) -> UserResponse:
    """Assign a role to a user (role managers only)."""
    user = user_service.change_role(
        db,
        actor,
        user_id,
        role_data.role,
        role_data.contributor_type,
    )
    db.commit()
    return UserResponse.model_validate(user)


@router.put("/{user_id}/verified", response_model=UserResponse)
async def update_verified(
    user_id: int,
    verified_data: VerifiedUpdate,
    actor: OptionalActorDep,
    db: SessionDep,
) -> UserResponse:
    """Mark a user as verified (user managers only)."""
    user = user_service.set_verified(db, actor, user_id, verified_data.verified)
    db.commit()
    return UserResponse.model_validate(user)


@router.post("/{user_id}/trust/recompute", response_model=TrustScoreResponse)
async def recompute_trust(
    user_id: int,
    actor: Annotated[User, Depends(require_roles(Role.SUPERADMIN, Role.ADMIN))],
    db: SessionDep,
) -> TrustScoreResponse:
    """Recompute a user's trust score immediately (admins only)."""
    score = recompute_trust_score(db, user_id)
    db.commit()
    return TrustScoreResponse(
        user_id=user_id,
        trust_score=score,
        trust_level=trust_level(score),
        contributor_eligible=is_contributor_eligible(score),
    )
