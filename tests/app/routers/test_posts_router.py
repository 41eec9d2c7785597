"""Tests for the posts routes."""

import pytest
from fastapi.testclient import TestClient

from app.db import get_db
from app.main import create_app
from app.models.message import Message
from app.models.post import Post


@pytest.fixture
def client(db):
    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_get_post_not_found(client: TestClient):
    resp = client.get("/posts/unknown")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Post not found"


def test_get_post_thread(client: TestClient, db, setup_post, setup_another_user):
    db.add(
        Message(
            id="reply-1",
            post_id=setup_post.id,
            user_id=setup_another_user.id,
            content="Set the env var",
            reply_to_message_id="deleted-message",
            created_at=setup_post.created_at,
        )
    )
    db.query(Post).filter(Post.id == setup_post.id).update({"answer_id": "reply-1"})
    db.commit()

    resp = client.get(f"/posts/{setup_post.id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["post"]["id"] == setup_post.id
    assert body["has_answer"] is True
    assert body["reply_count"] == 1
    assert body["root_message"]["id"] == setup_post.id
    group = body["groups"][0]
    assert group["author_id"] == setup_another_user.id
    assert group["is_answer_group"] is True
    assert group["messages"][0]["reply"] == {
        "state": "deleted",
        "target_id": "deleted-message",
    }
