"""
test_routers_auth.py — Tests for routers/auth.py

Covers login by (username, role), the uniform 401 for bad credentials,
and profile lookup.

Called by: pytest
Depends on: routers/auth.py, conftest.py
"""

# ── Login ───────────────────────────────────────────────────────────


class TestLogin:
    def test_login_ok(self, client, seller):
        resp = client.post(
            "/api/auth/login",
            json={"username": "patnasteel", "password": "secret123", "role": "Seller"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["user"]["id"] == seller.id
        assert data["user"]["presence"] == "Online"
        assert "password_hash" not in data["user"]

    def test_login_trims_username(self, client, buyer):
        resp = client.post(
            "/api/auth/login",
            json={"username": "  TestBuyer ", "password": "secret123", "role": "Buyer"},
        )
        assert resp.status_code == 200

    def test_wrong_role_401(self, client, seller):
        resp = client.post(
            "/api/auth/login",
            json={"username": "patnasteel", "password": "secret123", "role": "Buyer"},
        )
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid credentials"

    def test_wrong_password_401(self, client, seller):
        resp = client.post(
            "/api/auth/login",
            json={"username": "patnasteel", "password": "nope-nope", "role": "Seller"},
        )
        assert resp.status_code == 401

    def test_missing_fields_400(self, client):
        resp = client.post("/api/auth/login", json={"username": "patnasteel"})
        assert resp.status_code == 400
        assert "required" in resp.json()["error"]


# ── Profile ─────────────────────────────────────────────────────────


class TestProfile:
    def test_profile(self, client, buyer):
        resp = client.get(f"/api/auth/profile/{buyer.id}")
        assert resp.status_code == 200
        assert resp.json()["username"] == "testbuyer"

    def test_profile_missing(self, client):
        resp = client.get("/api/auth/profile/9999")
        assert resp.status_code == 404
        assert resp.json()["error"] == "User not found"
