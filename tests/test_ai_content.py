"""Tests for AI post generation and its schedule."""

import httpx
import pytest

from townhall.core.errors import GenerationFailed, InsufficientPermission, InvalidSchedule
from townhall.models.post import POST_STATUS_PUBLISHED
from townhall.schemas.ai import GeneratedPost, GenerationRequest
from townhall.services import ai_content
from townhall.services.content import post_tags


@pytest.mark.asyncio
async def test_admin_generates_published_post(db_session, admin_user, fake_generator) -> None:
    fake_generator.draft = GeneratedPost(title="Hip care", content="Tips", tags=["recovery"])
    request = GenerationRequest(prompt="Hip replacement aftercare")

    post = await ai_content.generate_post(db_session, admin_user, request, fake_generator)

    assert post.is_ai_generated is True
    assert post.status == POST_STATUS_PUBLISHED
    assert post.user_id == admin_user.id
    assert [tag.name for tag in post_tags(db_session, post.id)] == ["recovery"]
    assert fake_generator.requests == [request]


@pytest.mark.asyncio
async def test_denied_actor_never_reaches_generator(db_session, contributor, fake_generator) -> None:
    with pytest.raises(InsufficientPermission):
        await ai_content.generate_post(
            db_session, contributor, GenerationRequest(prompt="Anything"), fake_generator
        )

    assert fake_generator.requests == []


@pytest.mark.asyncio
async def test_http_generator_posts_prompt() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"title": "T", "content": "C", "tags": ["a"]})

    generator = ai_content.HttpContentGenerator(
        base_url="http://generator.test",
        api_key="k",
        transport=httpx.MockTransport(handler),
    )

    draft = await generator.generate(GenerationRequest(prompt="p"))

    assert draft == GeneratedPost(title="T", content="C", tags=["a"])
    assert seen == {"path": "/generate", "auth": "Bearer k"}


@pytest.mark.asyncio
async def test_http_generator_errors_become_generation_failed() -> None:
    generator = ai_content.HttpContentGenerator(
        base_url="http://generator.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )

    with pytest.raises(GenerationFailed):
        await generator.generate(GenerationRequest(prompt="p"))


@pytest.mark.asyncio
async def test_http_generator_rejects_bad_payload() -> None:
    generator = ai_content.HttpContentGenerator(
        base_url="http://generator.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"title": ""})),
    )

    with pytest.raises(GenerationFailed):
        await generator.generate(GenerationRequest(prompt="p"))


@pytest.mark.asyncio
async def test_unconfigured_generator() -> None:
    with pytest.raises(GenerationFailed):
        await ai_content.HttpContentGenerator(base_url="").generate(GenerationRequest(prompt="p"))


def test_generator_status(admin_user, fake_generator) -> None:
    assert ai_content.generator_status(admin_user, fake_generator) is True
    assert ai_content.generator_status(admin_user, ai_content.HttpContentGenerator(base_url="")) is False


def test_generator_status_requires_generation_permission(test_user, fake_generator) -> None:
    with pytest.raises(InsufficientPermission):
        ai_content.generator_status(test_user, fake_generator)


@pytest.mark.asyncio
async def test_batch_keeps_going_after_failed_item(db_session, admin_user, fake_generator) -> None:
    fake_generator.fail_on = "broken"
    requests = [
        GenerationRequest(prompt="Knee recovery"),
        GenerationRequest(prompt="broken prompt"),
        GenerationRequest(prompt="Shoulder recovery"),
    ]

    results = await ai_content.generate_batch(db_session, admin_user, requests, fake_generator)

    assert [item.index for item in results] == [0, 1, 2]
    assert results[0].post is not None
    assert results[1].post is None
    assert results[1].error == "Generator rejected the prompt"
    assert results[2].post is not None
    assert len(fake_generator.requests) == 3


@pytest.mark.asyncio
async def test_batch_denied_actor_never_reaches_generator(db_session, test_user, fake_generator) -> None:
    with pytest.raises(InsufficientPermission):
        await ai_content.generate_batch(
            db_session, test_user, [GenerationRequest(prompt="Anything")], fake_generator
        )

    assert fake_generator.requests == []


@pytest.mark.parametrize("expression", ["0 12 * * *", "*/15 * * * *", "0 8,20 * * 1-5"])
def test_valid_cron(expression: str) -> None:
    assert ai_content.validate_cron(expression) == expression


@pytest.mark.parametrize("expression", ["", "0 12 * *", "0 12 * * * *", "0 noon * * *"])
def test_invalid_cron(expression: str) -> None:
    with pytest.raises(InvalidSchedule):
        ai_content.validate_cron(expression)


def test_schedule_defaults_and_update(db_session, admin_user) -> None:
    schedule = ai_content.get_schedule(db_session, admin_user)
    assert schedule.enabled is False
    assert schedule.cron_expression == "0 12 * * *"

    ai_content.update_schedule(
        db_session,
        admin_user,
        enabled=True,
        cron_expression="0  6 * * *",
        content_type="personal",
    )

    assert schedule.enabled is True
    assert schedule.cron_expression == "0 6 * * *"
    assert schedule.content_type == "personal"


def test_schedule_requires_generation_permission(db_session, test_user) -> None:
    with pytest.raises(InsufficientPermission):
        ai_content.update_schedule(db_session, test_user, enabled=True)
