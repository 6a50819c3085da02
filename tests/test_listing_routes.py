"""
tests/test_listing_routes.py -- Integration tests for supply and post routes.

Coverage:
  - GET /supplies lists seeded supplies with "_id"
  - GET /supplies/{id}: 200 for a known id, 404 for unknown and malformed ids
  - POST /posts stores any JSON object and returns the insert acknowledgement
  - GET /posts lists stored posts
  - PUT /posts/{id}: writes only known post fields, upserts unknown ids
  - DELETE /posts/{id}: returns the delete acknowledgement
"""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from api.context import AppContext
from listings.models import SUPPLIES

Client = tuple[TestClient, AppContext]


class TestSupplies:
    def test_list_and_get_supply(self, api_client: Client) -> None:
        client, ctx = api_client
        (rice_id,) = ctx.listings.insert_many(SUPPLIES, [{"name": "rice", "quantity": 5}])

        resp = client.get("/api/v1/supplies")
        assert resp.status_code == 200
        assert {"_id": rice_id, "name": "rice", "quantity": 5} in resp.json()

        resp = client.get(f"/api/v1/supplies/{rice_id}")
        assert resp.status_code == 200
        assert resp.json() == {"_id": rice_id, "name": "rice", "quantity": 5}

    def test_unknown_supply_is_404(self, api_client: Client) -> None:
        client, _ = api_client
        resp = client.get(f"/api/v1/supplies/{'f' * 24}")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": {"code": "not_found", "message": "Supply not found"}}

    def test_malformed_supply_id_is_404(self, api_client: Client) -> None:
        client, _ = api_client
        assert client.get("/api/v1/supplies/not-an-id").status_code == 404


class TestPosts:
    def test_create_and_list_post(self, api_client: Client) -> None:
        client, _ = api_client
        body = {"title": "Spare tent", "category": "camping", "tags": ["outdoor"], "quantity": 1}
        resp = client.post("/api/v1/posts", json=body)
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["success"] is True
        assert data["message"] == "Post added successfully"
        assert data["data"]["acknowledged"] is True
        post_id = data["data"]["insertedId"]

        listed = client.get("/api/v1/posts").json()
        assert {"_id": post_id, **body} in listed

    def test_update_post_sets_given_fields(self, api_client: Client) -> None:
        client, ctx = api_client
        post_id = client.post("/api/v1/posts", json={"title": "Bike", "quantity": 1}).json()["data"]["insertedId"]

        resp = client.put(f"/api/v1/posts/{post_id}", json={"quantity": 2, "owner": "ignored"})
        assert resp.status_code == 200, resp.text
        assert resp.json() == {
            "acknowledged": True,
            "matchedCount": 1,
            "modifiedCount": 1,
            "upsertedId": None,
            "upsertedCount": 0,
        }
        assert ctx.listings.find_one("posts", post_id).data == {"title": "Bike", "quantity": 2}

    def test_update_unknown_post_upserts(self, api_client: Client) -> None:
        client, ctx = api_client
        post_id = "c" * 24
        resp = client.put(f"/api/v1/posts/{post_id}", json={"title": "Fresh"})
        assert resp.status_code == 200
        assert resp.json()["upsertedId"] == post_id
        assert resp.json()["upsertedCount"] == 1
        assert ctx.listings.find_one("posts", post_id).data == {"title": "Fresh"}

    def test_delete_post(self, api_client: Client) -> None:
        client, _ = api_client
        post_id = client.post("/api/v1/posts", json={"title": "Chair"}).json()["data"]["insertedId"]

        resp = client.delete(f"/api/v1/posts/{post_id}")
        assert resp.status_code == 200
        assert resp.json() == {"acknowledged": True, "deletedCount": 1}
        assert client.delete(f"/api/v1/posts/{post_id}").json()["deletedCount"] == 0
        assert all(p["_id"] != post_id for p in client.get("/api/v1/posts").json())

    def test_malformed_post_id_is_404(self, api_client: Client) -> None:
        client, _ = api_client
        assert client.put("/api/v1/posts/xyz", json={"title": "x"}).status_code == 404
        assert client.delete("/api/v1/posts/xyz").status_code == 404

    def test_post_body_must_be_object(self, api_client: Client) -> None:
        client, _ = api_client
        resp = client.post("/api/v1/posts", json=["not", "an", "object"])
        assert resp.status_code == 422


class TestStoreFailure:
    def test_store_error_is_opaque_500(self, api_client: Client, monkeypatch) -> None:
        """A database failure maps to 500 store_unavailable without leaking the cause."""
        client, ctx = api_client

        def broken(collection):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(ctx.listings, "find_all", broken)
        resp = client.get("/api/v1/posts")
        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "store_unavailable"
        assert "disk" not in resp.text
