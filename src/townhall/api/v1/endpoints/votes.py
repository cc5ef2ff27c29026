"""Vote-related endpoints for the Townhall API."""

from fastapi import APIRouter, BackgroundTasks, Query

from townhall.auth.guard import require_authenticated
from townhall.schemas.vote import VoteCreate, VoteResult
from townhall.services.trust import defer_trust_recompute
from townhall.services.votes import (
    VoteTarget,
    apply_vote,
    get_target_counters,
    get_user_vote,
)

from ..dependencies import CurrentActorDep, OptionalActorDep, ScopeDep, SessionDep

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", response_model=VoteResult)
async def cast_vote(
    vote_data: VoteCreate,
    actor: OptionalActorDep,
    db: SessionDep,
    scope: ScopeDep,
    background_tasks: BackgroundTasks,
) -> VoteResult:
    """Cast, flip or withdraw a vote on a post or comment.

    Repeating the current vote withdraws it; voting the other way flips it.
    """
    require_authenticated(actor)
    target = VoteTarget(post_id=vote_data.post_id, comment_id=vote_data.comment_id)
    counters = apply_vote(db, actor, target, vote_data.vote_type)
    owner_id = db.get(target.model, target.target_id).user_id
    db.commit()
    defer_trust_recompute(background_tasks, scope, owner_id)
    return VoteResult(
        upvotes=counters.upvotes,
        downvotes=counters.downvotes,
        vote_type=counters.current_vote.value if counters.current_vote else None,
    )


@router.get("/mine", response_model=VoteResult)
async def get_my_vote(
    actor: CurrentActorDep,
    db: SessionDep,
    post_id: int | None = Query(None),
    comment_id: int | None = Query(None),
) -> VoteResult:
    """Get the caller's vote on a post or comment along with its counters."""
    target = VoteTarget(post_id=post_id, comment_id=comment_id)
    upvotes, downvotes = get_target_counters(db, target)
    vote = get_user_vote(db, actor.id, target)
    return VoteResult(
        upvotes=upvotes,
        downvotes=downvotes,
        vote_type=vote.value if vote else None,
    )
