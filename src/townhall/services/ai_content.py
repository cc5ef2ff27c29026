"""Admin-only AI post generation and its persisted schedule.

The generator itself is an external service reached over HTTP. This module
owns the authorization gate, the request/response contract, and the cron
string an external job runner reads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

import httpx
from pydantic import ValidationError
from sqlalchemy.orm import Session

from townhall.auth.guard import authorize
from townhall.auth.permissions import Permission
from townhall.core.errors import GenerationFailed, InvalidSchedule, TownhallError
from townhall.core.settings import settings
from townhall.models import AIContentSchedule, Post
from townhall.models.ai_schedule import SCHEDULE_ROW_ID
from townhall.schemas.ai import GeneratedPost, GenerationRequest
from townhall.services.content import create_post

logger = logging.getLogger(__name__)

CRON_FIELD_COUNT = 5
_CRON_ALLOWED = set("0123456789*/,-")


class ContentGenerator(Protocol):
    """Anything that turns a generation request into a post draft."""

    @property
    def configured(self) -> bool:
        ...

    async def generate(self, request: GenerationRequest) -> GeneratedPost:
        ...


class HttpContentGenerator:
    """Client for the external generation service."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url if base_url is not None else settings.ai_generator_url
        self.api_key = api_key if api_key is not None else settings.ai_generator_api_key
        self.timeout = timeout if timeout is not None else settings.ai_generator_timeout_seconds
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    async def generate(self, request: GenerationRequest) -> GeneratedPost:
        if not self.configured:
            raise GenerationFailed("Content generator is not configured")
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.post(
                    "/generate",
                    json=request.model_dump(),
                    headers=headers,
                )
                response.raise_for_status()
                return GeneratedPost.model_validate(response.json())
        except httpx.HTTPError as exc:
            logger.warning("Content generator request failed: %s", exc)
            raise GenerationFailed() from exc
        except (ValueError, ValidationError) as exc:
            logger.error("Content generator returned an invalid payload", exc_info=True)
            raise GenerationFailed() from exc


async def generate_post(
    db: Session,
    actor: Any | None,
    request: GenerationRequest,
    generator: ContentGenerator,
) -> Post:
    """Generate a post through ``generator`` and store it as AI-authored.

    The actor is authorized before the external service is called.
    """
    authorize(actor, Permission.GENERATE_AI_POST)
    draft = await generator.generate(request)
    post = create_post(
        db,
        actor,
        title=draft.title,
        content=draft.content,
        topic_id=request.topic_id,
        tags=draft.tags,
        is_ai_generated=True,
    )
    logger.info("AI post %s generated for user %s", post.id, actor.id)
    return post


def generator_status(actor: Any | None, generator: ContentGenerator) -> bool:
    """Return whether the external generator is configured."""
    authorize(actor, Permission.GENERATE_AI_POST)
    return generator.configured


@dataclass
class BatchItem:
    """Outcome of one request in a batch generation."""

    index: int
    post: Post | None = None
    error: str | None = None


async def generate_batch(
    db: Session,
    actor: Any | None,
    requests: Sequence[GenerationRequest],
    generator: ContentGenerator,
) -> list[BatchItem]:
    """Generate one post per request; a failed item does not stop the rest.

    Each item is written inside its own savepoint so a failure leaves no
    partial rows behind.
    """
    authorize(actor, Permission.GENERATE_AI_POST)
    results: list[BatchItem] = []
    for index, request in enumerate(requests):
        try:
            with db.begin_nested():
                post = await generate_post(db, actor, request, generator)
        except TownhallError as exc:
            logger.warning("Batch item %s failed: %s", index, exc.detail)
            results.append(BatchItem(index=index, error=exc.detail))
        else:
            results.append(BatchItem(index=index, post=post))
    return results


def validate_cron(expression: str) -> str:
    """Return the normalized five-field cron expression or raise."""
    fields = expression.split()
    if len(fields) != CRON_FIELD_COUNT:
        raise InvalidSchedule(f"Cron expression needs {CRON_FIELD_COUNT} fields")
    for value in fields:
        if not set(value) <= _CRON_ALLOWED:
            raise InvalidSchedule(f"Invalid cron field: {value}")
    return " ".join(fields)


def _load_schedule(db: Session) -> AIContentSchedule:
    schedule = db.get(AIContentSchedule, SCHEDULE_ROW_ID)
    if schedule is None:
        schedule = AIContentSchedule(
            id=SCHEDULE_ROW_ID,
            enabled=False,
            cron_expression=settings.ai_default_cron,
        )
        db.add(schedule)
        db.flush()
    return schedule


def get_schedule(db: Session, actor: Any | None) -> AIContentSchedule:
    """Return the generation schedule, creating the default row if needed."""
    authorize(actor, Permission.GENERATE_AI_POST)
    return _load_schedule(db)


def update_schedule(
    db: Session,
    actor: Any | None,
    *,
    enabled: bool,
    cron_expression: str | None = None,
    content_type: str | None = None,
) -> AIContentSchedule:
    """Persist the schedule read by the external job runner."""
    authorize(actor, Permission.GENERATE_AI_POST)
    schedule = _load_schedule(db)
    schedule.enabled = enabled
    schedule.cron_expression = validate_cron(cron_expression or settings.ai_default_cron)
    if content_type is not None:
        schedule.content_type = content_type
    db.flush()
    return schedule
