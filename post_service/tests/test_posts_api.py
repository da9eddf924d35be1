from __future__ import annotations

from fastapi.testclient import TestClient


def _create(client: TestClient, image: str = "https://x/1.png", caption: str = "hi") -> dict:
    resp = client.post("/api/posts", json={"image": image, "caption": caption})
    assert resp.status_code == 201
    return resp.json()["data"]


def test_health_does_not_need_store(client: TestClient, repo) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["message"] == "Tinkergram Backend Server is running"
    assert body["timestamp"]
    assert repo.calls == []


def test_list_empty_collection(client: TestClient) -> None:
    resp = client.get("/api/posts")

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": [], "count": 0}


def test_create_returns_201_envelope(client: TestClient) -> None:
    resp = client.post("/api/posts", json={"image": "https://x/1.png", "caption": "hi"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Post created successfully"
    assert body["data"]["image"] == "https://x/1.png"
    assert body["data"]["caption"] == "hi"
    assert body["data"]["id"]
    assert body["data"]["created_at"].endswith("+00:00")


def test_create_missing_field_returns_400_without_success(client: TestClient, repo) -> None:
    resp = client.post("/api/posts", json={"image": "https://x/1.png"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Image and caption are required fields"}
    assert repo.calls == []


def test_create_without_body_is_missing_field(client: TestClient) -> None:
    resp = client.post("/api/posts")

    assert resp.status_code == 400
    assert resp.json() == {"error": "Image and caption are required fields"}


def test_create_with_malformed_body_returns_400(client: TestClient, repo) -> None:
    resp = client.post(
        "/api/posts",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert "error" in resp.json()
    assert "success" not in resp.json()
    assert repo.calls == []


def test_create_with_non_string_field_returns_400(client: TestClient) -> None:
    resp = client.post("/api/posts", json={"image": 1, "caption": "hi"})

    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid request")


def test_create_accepts_form_encoded_body(client: TestClient) -> None:
    resp = client.post("/api/posts", data={"image": "https://x/form.png", "caption": "from form"})

    assert resp.status_code == 201
    assert resp.json()["data"]["caption"] == "from form"


def test_form_encoded_create_is_still_validated(client: TestClient, repo) -> None:
    resp = client.post("/api/posts", data={"image": "https://x/form.png"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Image and caption are required fields"}
    assert repo.calls == []


def test_update_accepts_form_encoded_partial_body(client: TestClient) -> None:
    post_id = _create(client)["id"]

    resp = client.put(f"/api/posts/{post_id}", data={"caption": "edited"})

    assert resp.status_code == 200
    assert resp.json()["data"]["caption"] == "edited"
    assert resp.json()["data"]["image"] == "https://x/1.png"


def test_create_with_json_null_body_is_missing_field(client: TestClient) -> None:
    resp = client.post(
        "/api/posts", content=b"null", headers={"Content-Type": "application/json"}
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "Image and caption are required fields"}


def test_create_too_long_caption_returns_400(client: TestClient) -> None:
    resp = client.post(
        "/api/posts", json={"image": "https://x/1.png", "caption": "c" * 256}
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "Caption must be less than 255 characters"}


def test_get_post(client: TestClient) -> None:
    created = _create(client)

    resp = client.get(f"/api/posts/{created['id']}")

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": created}


def test_get_unknown_post_returns_404(client: TestClient) -> None:
    resp = client.get("/api/posts/6500000000000000000000aa")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Post not found"}


def test_update_post(client: TestClient) -> None:
    created = _create(client, caption="old")

    resp = client.put(f"/api/posts/{created['id']}", json={"caption": "new"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Post updated successfully"
    assert body["data"]["caption"] == "new"
    assert body["data"]["image"] == created["image"]
    assert body["data"]["created_at"] == created["created_at"]


def test_update_without_fields_returns_400(client: TestClient) -> None:
    created = _create(client)

    resp = client.put(f"/api/posts/{created['id']}", json={})

    assert resp.status_code == 400
    assert resp.json() == {
        "error": "At least one field (image or caption) must be provided"
    }


def test_update_unknown_post_returns_404(client: TestClient) -> None:
    resp = client.put("/api/posts/6500000000000000000000aa", json={"caption": "x"})

    assert resp.status_code == 404
    assert resp.json() == {"error": "Post not found"}


def test_delete_post_twice(client: TestClient) -> None:
    created = _create(client)

    first = client.delete(f"/api/posts/{created['id']}")
    second = client.delete(f"/api/posts/{created['id']}")

    assert first.status_code == 200
    assert first.json() == {
        "success": True,
        "message": "Post deleted successfully",
        "data": created,
    }
    assert second.status_code == 404


def test_search_requires_q(client: TestClient) -> None:
    missing = client.get("/api/posts/search")
    empty = client.get("/api/posts/search", params={"q": ""})

    for resp in (missing, empty):
        assert resp.status_code == 400
        assert resp.json() == {"error": 'Search query parameter "q" is required'}


def test_list_and_search_scenario(client: TestClient) -> None:
    first = _create(client, image="https://x/1.png", caption="Morning coffee")
    second = _create(client, image="https://x/2.png", caption="Sunset at the beach")
    third = _create(client, image="https://x/3.png", caption="Late dinner")

    listed = client.get("/api/posts").json()
    found = client.get("/api/posts/search", params={"q": "BEACH"}).json()

    assert listed["count"] == 3
    assert [p["id"] for p in listed["data"]] == [third["id"], second["id"], first["id"]]
    assert found == {"success": True, "data": [second], "count": 1, "query": "BEACH"}


def test_store_error_returns_400_with_store_message(client: TestClient, repo, store_error) -> None:
    repo.fail_with = store_error

    resp = client.get("/api/posts")

    assert resp.status_code == 400
    assert resp.json() == {"error": "connection refused"}


def test_get_with_store_error_returns_404(client: TestClient, repo, store_error) -> None:
    repo.fail_with = store_error

    resp = client.get("/api/posts/6500000000000000000000aa")

    assert resp.status_code == 404


def test_unexpected_error_returns_500(client: TestClient, repo) -> None:
    repo.fail_with = RuntimeError("boom")

    resp = client.get("/api/posts")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}


def test_unmatched_route_returns_404(client: TestClient) -> None:
    resp = client.get("/api/nothing-here")

    assert resp.status_code == 404
    assert resp.json() == {
        "error": "Route not found",
        "message": "Cannot GET /api/nothing-here",
    }


def test_unmatched_method_returns_route_not_found(client: TestClient) -> None:
    resp = client.delete("/api/posts")

    assert resp.status_code == 404
    assert resp.json()["error"] == "Route not found"


def test_request_id_header_is_echoed(client: TestClient) -> None:
    resp = client.get("/api/posts", headers={"X-Request-Id": "req-123"})

    assert resp.headers["X-Request-Id"] == "req-123"
    assert resp.headers["X-Span-Id"] == "0"
