"""
HTTP API tests.

The user store is replaced with an in-memory fake, so no database is needed.
"""

from types import SimpleNamespace

import pytest

from morfit import users as user_store
from morfit.errors import ConflictError
from morfit.security import hash_password

PASSWORD = "Morfit-2024!"


@pytest.fixture(scope="module")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def store(monkeypatch, password_hash, admin, staff):
    """In-memory stand-in for morfit.users, keyed by email."""
    rows = {
        admin.email: {
            "id": admin.id,
            "email": admin.email,
            "password": password_hash,
            "fullName": admin.full_name,
            "roleId": "admin",
            "isActive": True,
            "lastLogin": None,
            "createdAt": "2024-01-01T00:00:00+00:00",
        },
        staff.email: {
            "id": staff.id,
            "email": staff.email,
            "password": password_hash,
            "fullName": staff.full_name,
            "roleId": "staff",
            "isActive": True,
            "lastLogin": None,
            "createdAt": "2024-01-02T00:00:00+00:00",
        },
        "eski@morfitstudio.com": {
            "id": "33333333-3333-4333-a333-333333333333",
            "email": "eski@morfitstudio.com",
            "password": password_hash,
            "fullName": "Eski Personel",
            "roleId": "staff",
            "isActive": False,
            "lastLogin": None,
            "createdAt": "2023-05-01T00:00:00+00:00",
        },
    }
    touched = []

    def create_user(email, password_hash, full_name, role_id):
        if email in rows:
            raise ConflictError("Email already registered")
        row = {
            "id": f"new-{len(rows)}",
            "email": email,
            "password": password_hash,
            "fullName": full_name,
            "roleId": role_id,
            "isActive": True,
            "lastLogin": None,
            "createdAt": "2024-06-01T00:00:00+00:00",
        }
        rows[email] = row
        return row

    def list_users(limit, offset):
        ordered = sorted(rows.values(), key=lambda u: (u["fullName"], u["id"]))
        return ordered[offset : offset + limit]

    monkeypatch.setattr(user_store, "get_user_by_email", rows.get)
    monkeypatch.setattr(user_store, "touch_last_login", touched.append)
    monkeypatch.setattr(user_store, "role_exists", lambda r: r in {"admin", "staff", "member"})
    monkeypatch.setattr(user_store, "create_user", create_user)
    monkeypatch.setattr(user_store, "count_users", lambda: len(rows))
    monkeypatch.setattr(user_store, "list_users", list_users)

    return SimpleNamespace(rows=rows, touched=touched)


class TestHealth:
    def test_public(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json["success"] is True
        assert resp.json["environment"] == "testing"

    def test_request_id_generated(self, client):
        assert client.get("/api/health").headers["X-Request-ID"]

    def test_unknown_endpoint_uses_envelope(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.json["success"] is False
        assert resp.json["error"] == "API endpoint not found"


class TestLogin:
    def test_success_returns_token_for_identity(self, client, store, tokens, staff):
        resp = client.post(
            "/api/auth/login", json={"email": "  Trainer@MorFitStudio.com ", "password": PASSWORD}
        )
        assert resp.status_code == 200
        data = resp.json["data"]
        assert data["user"]["email"] == staff.email
        assert "password" not in data["user"]
        assert tokens.verify(data["token"]) == staff
        assert store.touched == [staff.id]

    def test_token_works_on_protected_route(self, client, store, staff):
        token = client.post(
            "/api/auth/login", json={"email": staff.email, "password": PASSWORD}
        ).json["data"]["token"]
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200
        assert resp.json["data"] == staff.to_claims()

    def test_wrong_password(self, client, store, staff):
        resp = client.post("/api/auth/login", json={"email": staff.email, "password": "nope"})
        assert resp.status_code == 401
        assert resp.json == {
            "success": False,
            "error": "Invalid email or password",
            "timestamp": resp.json["timestamp"],
        }
        assert store.touched == []

    def test_unknown_email_same_response(self, client, store):
        resp = client.post(
            "/api/auth/login", json={"email": "yok@morfitstudio.com", "password": PASSWORD}
        )
        assert resp.status_code == 401
        assert resp.json["error"] == "Invalid email or password"

    def test_inactive_account(self, client, store):
        resp = client.post(
            "/api/auth/login", json={"email": "eski@morfitstudio.com", "password": PASSWORD}
        )
        assert resp.status_code == 401

    def test_invalid_body(self, client, store):
        resp = client.post("/api/auth/login", json={"email": "not-an-email"})
        assert resp.status_code == 400
        assert resp.json["success"] is False
        fields = {d["field"] for d in resp.json["details"]}
        assert fields == {"email", "password"}


class TestRegister:
    BODY = {
        "email": "Yeni@MorFitStudio.com",
        "password": "yeni-sifre-123",
        "fullName": "  Yeni <Eğitmen> ",
        "roleId": "staff",
    }

    def test_requires_token(self, client, store):
        assert client.post("/api/auth/register", json=self.BODY).status_code == 401

    def test_requires_admin_role(self, client, store, auth_header, staff):
        resp = client.post("/api/auth/register", json=self.BODY, headers=auth_header(staff))
        assert resp.status_code == 403
        assert resp.json["error"] == "Insufficient permissions"

    def test_admin_creates_user(self, client, store, auth_header, admin, tokens):
        resp = client.post("/api/auth/register", json=self.BODY, headers=auth_header(admin))
        assert resp.status_code == 201

        user = resp.json["data"]["user"]
        assert user["email"] == "yeni@morfitstudio.com"
        assert user["fullName"] == "Yeni Eğitmen"
        assert tokens.verify(resp.json["data"]["token"]).role_id == "staff"

        stored = store.rows["yeni@morfitstudio.com"]
        assert stored["password"].startswith("$2b$12$")
        assert stored["password"] != self.BODY["password"]

    def test_duplicate_email_is_409(self, client, store, auth_header, admin, staff):
        body = {**self.BODY, "email": staff.email}
        resp = client.post("/api/auth/register", json=body, headers=auth_header(admin))
        assert resp.status_code == 409
        assert resp.json["error"] == "Email already registered"

    def test_unknown_role_is_400(self, client, store, auth_header, admin):
        body = {**self.BODY, "roleId": "superuser"}
        resp = client.post("/api/auth/register", json=body, headers=auth_header(admin))
        assert resp.status_code == 400
        assert resp.json["details"] == [{"field": "roleId", "message": "Unknown role"}]

    def test_short_password_is_400(self, client, store, auth_header, admin):
        body = {**self.BODY, "password": "kisa"}
        resp = client.post("/api/auth/register", json=body, headers=auth_header(admin))
        assert resp.status_code == 400

    def test_password_over_72_bytes_is_400(self, client, store, auth_header, admin):
        body = {**self.BODY, "password": "ş" * 40}
        resp = client.post("/api/auth/register", json=body, headers=auth_header(admin))
        assert resp.status_code == 400


class TestUsers:
    def test_admin_lists_paginated(self, client, store, auth_header, admin):
        resp = client.get("/api/users?page=0&limit=2", headers=auth_header(admin))
        assert resp.status_code == 200

        meta = resp.json["meta"]
        assert meta["totalCount"] == 3
        assert meta["totalPages"] == 2
        assert meta["hasNextPage"] is True
        assert meta["hasPrevPage"] is False
        assert [u["fullName"] for u in resp.json["data"]] == ["Admin User", "Ayşe Yılmaz"]
        assert all("password" not in u for u in resp.json["data"])

    def test_last_page(self, client, store, auth_header, admin):
        resp = client.get("/api/users?page=1&limit=2", headers=auth_header(admin))
        meta = resp.json["meta"]
        assert meta["hasNextPage"] is False
        assert meta["hasPrevPage"] is True
        assert len(resp.json["data"]) == 1

    def test_bad_limit(self, client, store, auth_header, admin):
        resp = client.get("/api/users?limit=500", headers=auth_header(admin))
        assert resp.status_code == 400
        assert resp.json["details"][0]["field"] == "limit"

    def test_staff_forbidden(self, client, store, auth_header, staff):
        assert client.get("/api/users", headers=auth_header(staff)).status_code == 403


class TestSettings:
    def test_devices_require_token(self, client):
        assert client.get("/api/settings/devices").status_code == 401

    def test_devices(self, client, auth_header, staff):
        resp = client.get("/api/settings/devices", headers=auth_header(staff))
        assert resp.status_code == 200
        assert {d["type"] for d in resp.json["data"]} == {"vacuum", "rf", "laser"}


class TestClientErrors:
    def test_anonymous_report(self, client, caplog):
        resp = client.post("/api/client-errors", json={"message": "TypeError: x is undefined"})
        assert resp.status_code == 200
        assert resp.json["success"] is True
        assert "user_id=anonymous" in caplog.text

    def test_report_tagged_with_user(self, client, caplog, auth_header, staff):
        resp = client.post(
            "/api/client-errors",
            json={"message": "boom", "url": "https://morfitstudio.com/members"},
            headers=auth_header(staff),
        )
        assert resp.status_code == 200
        assert f"user_id={staff.id}" in caplog.text

    def test_bad_token_still_accepted(self, client, caplog):
        resp = client.post(
            "/api/client-errors",
            json={"message": "boom"},
            headers={"Authorization": "Bearer not.a.token"},
        )
        assert resp.status_code == 200
        assert "user_id=anonymous" in caplog.text

    def test_message_required(self, client):
        assert client.post("/api/client-errors", json={}).status_code == 400
