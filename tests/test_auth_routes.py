"""
tests/test_auth_routes.py -- Integration tests for POST /register and POST /login.

These tests exercise the full stack: FastAPI routing -> AppContext dependency
-> auth service -> UserStore -> response serialization.

Coverage:
  - Register: 201 on first use, 400 duplicate_user on the second
  - Register: no password material in the response or the stored record
  - Login: 200 with a token that decodes to the registered email
  - Login: wrong password and unknown email give indistinguishable 401s
  - Missing fields: 422 validation_error envelope
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from api.context import AppContext
from auth.tokens import decode_access_token

Client = tuple[TestClient, AppContext]


def _register(client: TestClient, name: str, email: str, password: str):
    return client.post("/api/v1/register", json={"name": name, "email": email, "password": password})


class TestRegister:
    def test_register_then_duplicate(self, api_client: Client) -> None:
        """Same email twice -> exactly one 201 and one 400 duplicate_user."""
        client, ctx = api_client
        first = _register(client, "Ana", "ana@x.com", "pw123")
        second = _register(client, "Ana Again", "ana@x.com", "other-pw")

        assert first.status_code == 201, first.text
        assert first.json() == {"success": True, "message": "User registered successfully"}

        assert second.status_code == 400, second.text
        body = second.json()
        assert body["success"] is False
        assert body["error"]["code"] == "duplicate_user"
        assert body["error"]["message"] == "User already exists"

        # The first registration wins; the stored name is not overwritten.
        assert ctx.user_store.get_by_email("ana@x.com").name == "Ana"

    def test_register_stores_hash_not_plaintext(self, api_client: Client) -> None:
        client, ctx = api_client
        resp = _register(client, "Ben", "ben@x.com", "s3cret-pw")
        assert resp.status_code == 201
        assert "s3cret-pw" not in resp.text

        user = ctx.user_store.get_by_email("ben@x.com")
        assert user is not None
        assert user.hashed_password != "s3cret-pw"
        assert user.hashed_password.startswith("$2b$10$")

    def test_register_email_is_case_sensitive(self, api_client: Client) -> None:
        client, _ = api_client
        assert _register(client, "Cy", "cy@x.com", "pw").status_code == 201
        assert _register(client, "Cy", "CY@x.com", "pw").status_code == 201

    def test_register_missing_field_is_422(self, api_client: Client) -> None:
        client, _ = api_client
        resp = client.post("/api/v1/register", json={"email": "nopw@x.com", "name": "No Password"})
        assert resp.status_code == 422
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "validation_error"

    def test_register_unencodable_password_is_422(self, api_client: Client) -> None:
        """A lone surrogate is valid JSON but cannot be hashed; it is a client error."""
        client, ctx = api_client
        resp = client.post(
            "/api/v1/register",
            content=b'{"name": "S", "email": "sur@x.com", "password": "\\ud800"}',
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 422, resp.text
        assert resp.json()["error"]["code"] == "validation_error"
        assert ctx.user_store.get_by_email("sur@x.com") is None

    def test_register_password_with_nul_is_accepted(self, api_client: Client) -> None:
        client, _ = api_client
        assert _register(client, "Nul", "nul@x.com", "pw\u0000x").status_code == 201


class TestLogin:
    def test_login_returns_decodable_token(self, api_client: Client) -> None:
        client, ctx = api_client
        assert _register(client, "Dee", "dee@x.com", "pw123").status_code == 201

        resp = client.post("/api/v1/login", json={"email": "dee@x.com", "password": "pw123"})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        payload = decode_access_token(body["token"], ctx.settings.secret_key)
        assert payload is not None
        assert payload["email"] == "dee@x.com"
        assert resp.headers["Cache-Control"] == "no-store"

    def test_wrong_password_is_401(self, api_client: Client) -> None:
        client, _ = api_client
        _register(client, "Eve", "eve@x.com", "pw123")
        resp = client.post("/api/v1/login", json={"email": "eve@x.com", "password": "wrong"})
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "invalid_credentials"
        assert "token" not in resp.json()

    def test_unknown_email_matches_wrong_password(self, api_client: Client) -> None:
        """Unknown account and wrong password must be indistinguishable to the client."""
        client, _ = api_client
        _register(client, "Fay", "fay@x.com", "pw123")

        wrong_pw = client.post("/api/v1/login", json={"email": "fay@x.com", "password": "nope"})
        unknown = client.post("/api/v1/login", json={"email": "ghost@x.com", "password": "nope"})

        assert wrong_pw.status_code == unknown.status_code == 401
        assert wrong_pw.content == unknown.content
        assert wrong_pw.headers["Cache-Control"] == unknown.headers["Cache-Control"] == "no-store"

    def test_login_missing_password_is_422(self, api_client: Client) -> None:
        client, _ = api_client
        resp = client.post("/api/v1/login", json={"email": "dee@x.com"})
        assert resp.status_code == 422

    def test_login_unencodable_password_is_422(self, api_client: Client) -> None:
        client, _ = api_client
        resp = client.post(
            "/api/v1/login",
            content=b'{"email": "dee@x.com", "password": "\\ud800"}',
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 422

    def test_token_is_signed_with_context_settings(self, api_client: Client, monkeypatch) -> None:
        client, ctx = api_client
        own = ctx.settings.model_copy(update={"secret_key": "r" * 40, "token_expire_seconds": 120})
        monkeypatch.setattr(ctx, "settings", own)
        _register(client, "Gus", "gus@x.com", "pw123")

        token = client.post("/api/v1/login", json={"email": "gus@x.com", "password": "pw123"}).json()["token"]
        payload = decode_access_token(token, "r" * 40)
        assert payload is not None
        assert payload["exp"] - payload["iat"] == 120
