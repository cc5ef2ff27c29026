# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from contextlib import nullcontext
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from townhall.api.v1.dependencies import get_content_generator
from townhall.core.errors import GenerationFailed
from townhall.core.security import create_access_token
from townhall.db.session import Base, get_session_scope
from townhall.db.session import get_db as app_get_session
from townhall.main import app as fastapi_app
from townhall.models import Comment, Post, Tag, Topic, User
from townhall.models.post import POST_STATUS_PUBLISHED
from townhall.schemas.ai import GeneratedPost, GenerationRequest

TEST_DB_URL = "sqlite://"

_USERNAME_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


class FakeGenerator:
    """Content generator double that records requests."""

    configured = True

    def __init__(self, draft: GeneratedPost | None = None, fail_on: str | None = None) -> None:
        self.draft = draft or GeneratedPost(
            title="Understanding recovery after knee surgery",
            content="Recovery usually takes several weeks of guided physiotherapy.",
            tags=[],
        )
        self.requests: list[GenerationRequest] = []
        self.fail_on = fail_on

    async def generate(self, request: GenerationRequest) -> GeneratedPost:
        self.requests.append(request)
        if self.fail_on is not None and self.fail_on in request.prompt:
            raise GenerationFailed("Generator rejected the prompt")
        return self.draft


@pytest.fixture()
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture(autouse=True)
def override_session_dependency(
    app: FastAPI,
    db_session: Session,
    fake_generator: FakeGenerator,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    overrides: dict[Callable[..., Any], Callable[..., Any]] = {
        app_get_session: _get_session_override,
        # Post-response trust recomputation runs in the test session.
        get_session_scope: lambda: (lambda: nullcontext(db_session)),
        get_content_generator: lambda: fake_generator,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users with the given role."""

    def _make_user(
        role: str | None = "user",
        *,
        is_admin: bool = False,
        trust_score: int = 0,
        username: str | None = None,
    ) -> User:
        user = User(
            username=username or f"member{next(_USERNAME_COUNTER)}",
            role=role,
            is_admin=is_admin,
            trust_score=trust_score,
            verified=False,
        )
        db_session.add(user)
        db_session.flush()
        if role is None:
            # Legacy rows carry a NULL role; bypass the Python-side default.
            db_session.execute(update(User).where(User.id == user.id).values(role=None))
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return a member with the plain user role."""
    return make_user("user")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second plain user."""
    return make_user("user")


@pytest.fixture()
def contributor(make_user: Callable[..., User]) -> User:
    return make_user("contributor")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("admin")


@pytest.fixture()
def superadmin(make_user: Callable[..., User]) -> User:
    return make_user("superadmin")


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return a factory building bearer headers for a user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture()
def auth_token(test_user: User, auth_headers: Callable[[User], dict[str, str]]) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def test_post(db_session: Session, other_user: User) -> Post:
    """Create a published post owned by ``other_user``."""
    post = Post(
        user_id=other_user.id,
        title="Living with type 1 diabetes",
        content="Sharing what helped me adjust during the first year.",
        status=POST_STATUS_PUBLISHED,
    )
    db_session.add(post)
    db_session.flush()
    db_session.refresh(post)
    return post


@pytest.fixture()
def test_comment(db_session: Session, test_post: Post, other_user: User) -> Comment:
    """Create a comment owned by ``other_user`` on ``test_post``."""
    comment = Comment(post_id=test_post.id, user_id=other_user.id, content="Thanks for sharing.")
    db_session.add(comment)
    db_session.flush()
    test_post.comment_count = 1
    db_session.flush()
    db_session.refresh(comment)
    return comment


@pytest.fixture()
def tag(db_session: Session) -> Tag:
    tag = Tag(name="recovery", color="green")
    db_session.add(tag)
    db_session.flush()
    return tag


@pytest.fixture()
def topic(db_session: Session) -> Topic:
    topic = Topic(name="Orthopedics", slug="orthopedics", description="Bones and joints")
    db_session.add(topic)
    db_session.flush()
    return topic
