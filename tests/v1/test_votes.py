"""Tests for vote-related endpoints."""

from fastapi import status

from townhall.models import Post
from townhall.models.post import POST_STATUS_PENDING


def test_cast_upvote(client, auth_token, test_post) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"post_id": test_post.id, "vote_type": "upvote"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"upvotes": 1, "downvotes": 0, "vote_type": "upvote"}


def test_repeat_vote_withdraws(client, auth_token, test_comment) -> None:
    payload = {"comment_id": test_comment.id, "vote_type": "downvote"}
    client.post("/api/v1/votes/", json=payload, headers=auth_token)

    response = client.post("/api/v1/votes/", json=payload, headers=auth_token)

    assert response.json() == {"upvotes": 0, "downvotes": 0, "vote_type": None}


def test_vote_updates_owner_trust(client, auth_token, test_post, other_user) -> None:
    """The post owner's trust score is recomputed after the response."""
    client.post(
        "/api/v1/votes/",
        json={"post_id": test_post.id, "vote_type": "upvote"},
        headers=auth_token,
    )

    # One published post plus one upvote received.
    assert other_user.trust_score == 6


def test_vote_requires_authentication(client, test_post) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"post_id": test_post.id, "vote_type": "upvote"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"detail": "Authentication required"}


def test_vote_with_both_targets(client, auth_token, test_post, test_comment) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"post_id": test_post.id, "comment_id": test_comment.id, "vote_type": "upvote"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_vote_without_target(client, auth_token) -> None:
    response = client.post("/api/v1/votes/", json={"vote_type": "upvote"}, headers=auth_token)

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_vote_nonexistent_post(client, auth_token) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"post_id": 99999, "vote_type": "upvote"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_vote_invalid_type(client, auth_token, test_post) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"post_id": test_post.id, "vote_type": "sideways"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_get_my_vote(client, auth_token, test_post) -> None:
    client.post(
        "/api/v1/votes/",
        json={"post_id": test_post.id, "vote_type": "downvote"},
        headers=auth_token,
    )

    response = client.get(f"/api/v1/votes/mine?post_id={test_post.id}", headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"upvotes": 0, "downvotes": 1, "vote_type": "downvote"}


def test_invalid_token_is_rejected(client, test_post) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"post_id": test_post.id, "vote_type": "upvote"},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_pending_post_rejects_votes(client, db_session, auth_token, contributor) -> None:
    pending = Post(user_id=contributor.id, title="Draft", content="Body", status=POST_STATUS_PENDING)
    db_session.add(pending)
    db_session.flush()

    cast = client.post(
        "/api/v1/votes/",
        json={"post_id": pending.id, "vote_type": "upvote"},
        headers=auth_token,
    )
    mine = client.get(f"/api/v1/votes/mine?post_id={pending.id}", headers=auth_token)

    assert cast.status_code == status.HTTP_404_NOT_FOUND
    assert mine.status_code == status.HTTP_404_NOT_FOUND


def test_anonymous_vote_on_missing_post(client) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"post_id": 99999, "vote_type": "upvote"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
