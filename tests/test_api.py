"""Tests for HTTP endpoints."""

from fastapi.testclient import TestClient

from photogram.api.app import create_app
from photogram.services.documents import PHOTOS, USERS
from tests.conftest import InMemoryDocumentStore, photo_document, user_document


def _client(container) -> TestClient:  # type: ignore[no-untyped-def]
    return TestClient(create_app(container))


def test_health(container) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_register_and_check_username(container, store: InMemoryDocumentStore) -> None:
    client = _client(container)
    payload = {
        "user_id": "u1",
        "username": "alice",
        "full_name": "Alice Liddell",
        "email_address": "alice@example.com",
    }

    assert client.get("/users/exists/alice").json()["exists"] is False

    created = client.post("/users", json=payload)
    assert created.status_code == 201
    assert created.json()["user_id"] == "u1"
    assert store.get(USERS, created.json()["doc_id"])["username"] == "alice"

    assert client.get("/users/exists/alice").json() == {
        "username": "alice",
        "count": 1,
        "exists": True,
    }
    duplicate = client.post("/users", json={**payload, "user_id": "u9"})
    assert duplicate.status_code == 409


def test_profile_returns_user_and_photos(
    container, store: InMemoryDocumentStore
) -> None:
    store.add(USERS, user_document("u1", "alice"))
    store.add(PHOTOS, photo_document("p1", "u1", 100))
    store.add(PHOTOS, photo_document("p2", "u1", 200))

    response = _client(container).get("/profiles/alice")

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["username"] == "alice"
    assert [photo["photo_id"] for photo in data["photos"]] == ["p2", "p1"]


def test_unknown_profile_is_not_found(container) -> None:
    response = _client(container).get("/profiles/nobody")

    assert response.status_code == 404


def test_follow_invalidates_feed(container, store: InMemoryDocumentStore) -> None:
    alice_doc_id = store.add(USERS, user_document("u1", "alice"))
    bob_doc_id = store.add(USERS, user_document("u2", "bob"))
    store.add(PHOTOS, photo_document("p1", "u2", 100))
    client = _client(container)

    assert client.get("/users/u1/feed").json() == {"photos": []}

    response = client.post(
        "/users/u1/following",
        json={"target_user_id": "u2", "currently_following": False},
    )
    assert response.status_code == 200
    assert response.json() == {"following": True}
    assert store.get(USERS, alice_doc_id)["following"] == ["u2"]
    assert store.get(USERS, bob_doc_id)["followers"] == ["u1"]

    feed = client.get("/users/u1/feed").json()["photos"]
    assert [item["photo"]["photo_id"] for item in feed] == ["p1"]
    assert feed[0]["user"]["username"] == "bob"
    assert feed[0]["user_liked_photo"] is False


def test_follow_unknown_target_is_not_found(
    container, store: InMemoryDocumentStore
) -> None:
    store.add(USERS, user_document("u1", "alice"))

    response = _client(container).post(
        "/users/u1/following", json={"target_user_id": "ghost"}
    )

    assert response.status_code == 404


def test_suggestions_exclude_followed(container, store: InMemoryDocumentStore) -> None:
    store.add(USERS, user_document("u1", "alice", following=["u2"]))
    store.add(USERS, user_document("u2", "bob"))
    store.add(USERS, user_document("u3", "carol"))

    response = _client(container).get("/users/u1/suggestions")

    assert [profile["user_id"] for profile in response.json()["profiles"]] == ["u3"]


def test_like_save_and_comment(container, store: InMemoryDocumentStore) -> None:
    user_doc_id = store.add(USERS, user_document("u1", "alice", following=["u2"]))
    store.add(USERS, user_document("u2", "bob"))
    post_doc_id = store.add(PHOTOS, photo_document("p1", "u2", 100))
    client = _client(container)

    client.get("/users/u1/feed")
    liked = client.post(f"/posts/{post_doc_id}/likes", json={"user_id": "u1"})
    saved = client.post(
        f"/posts/{post_doc_id}/saves", json={"user_id": "u1", "post_id": "p1"}
    )
    commented = client.post(
        f"/posts/{post_doc_id}/comments",
        json={"display_name": "alice", "comment": "nice"},
    )

    assert liked.json() == {"liked": True}
    assert saved.json() == {"saved": True}
    assert commented.status_code == 201
    assert store.get(USERS, user_doc_id)["savedPosts"] == ["p1"]
    photo = store.get(PHOTOS, post_doc_id)
    assert photo["likes"] == ["u1"]
    assert photo["saved"] == ["u1"]
    assert photo["comments"][0]["comment"] == "nice"

    feed = client.get("/users/u1/feed").json()["photos"]
    assert feed[0]["user_liked_photo"] is True
    assert feed[0]["user_saved_photo"] is True

    post = client.get("/posts/p1").json()["photo"]
    assert post["comments"][0]["display_name"] == "alice"


def test_remote_failure_maps_to_bad_gateway(
    container, store: InMemoryDocumentStore
) -> None:
    post_doc_id = store.add(PHOTOS, photo_document("p1", "u2", 100))
    store.failing.add(("array_union", PHOTOS))

    response = _client(container).post(
        f"/posts/{post_doc_id}/likes", json={"user_id": "u1"}
    )

    assert response.status_code == 502


def test_missing_post_is_not_found(container) -> None:
    response = _client(container).get("/posts/missing")

    assert response.status_code == 404
