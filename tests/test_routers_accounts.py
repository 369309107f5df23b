"""
test_routers_accounts.py — Tests for routers/accounts.py

Covers buyer registration, seller onboarding, role-checked lookups and
the account listings.

Called by: pytest
Depends on: routers/accounts.py, conftest.py
"""

BUYER = {
    "name": "Sunita Devi",
    "email": "sunita@example.com",
    "username": "sunita",
    "password": "secret123",
    "phone": "9801234567",
    "address": "Boring Road, Patna",
}

# ── Buyers ──────────────────────────────────────────────────────────


class TestBuyerRegistration:
    def test_register(self, client):
        resp = client.post("/api/buyers/register", json=BUYER)
        assert resp.status_code == 201
        data = resp.json()
        assert data["message"] == "Buyer registered successfully"
        assert data["user"]["role"] == "Buyer"
        assert data["user"]["phone"] == "9801234567"
        assert "password" not in data["user"]

    def test_duplicate_username_409(self, client, seller):
        resp = client.post("/api/buyers/register", json={**BUYER, "username": "patnasteel"})
        assert resp.status_code == 409
        assert resp.json()["error"] == "Username already exists"

    def test_duplicate_email_same_role_409(self, client, buyer):
        resp = client.post(
            "/api/buyers/register", json={**BUYER, "email": "buyer@steelmart.in"}
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "Email already registered as Buyer"

    def test_email_reused_across_roles(self, client, seller):
        resp = client.post(
            "/api/buyers/register", json={**BUYER, "email": "sales@patnasteel.in"}
        )
        assert resp.status_code == 201

    def test_short_password_400(self, client):
        resp = client.post("/api/buyers/register", json={**BUYER, "password": "abc"})
        assert resp.status_code == 400
        assert "at least 6" in resp.json()["error"]

    def test_bad_email_400(self, client):
        resp = client.post("/api/buyers/register", json={**BUYER, "email": "sunita"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid email format"

    def test_get_buyer(self, client, buyer, seller):
        assert client.get(f"/api/buyers/{buyer.id}").status_code == 200
        resp = client.get(f"/api/buyers/{seller.id}")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Buyer not found"


# ── Sellers ─────────────────────────────────────────────────────────


class TestSellers:
    def test_create_seller_then_login(self, client):
        payload = {
            "name": "Gaya Steel Depot",
            "email": "gaya@example.com",
            "username": "gayasteel",
            "password": "secret123",
            "description": "Sheets and plates",
        }
        resp = client.post("/api/sellers", json=payload)
        assert resp.status_code == 201
        assert resp.json()["message"] == "Seller created successfully"
        assert resp.json()["user"]["description"] == "Sheets and plates"

        login = client.post(
            "/api/auth/login",
            json={"username": "gayasteel", "password": "secret123", "role": "Seller"},
        )
        assert login.status_code == 200

    def test_missing_fields_400(self, client):
        resp = client.post("/api/sellers", json={"name": "No Login"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Name, email, username, and password are required"

    def test_list_sellers_excludes_buyers(self, client, buyer, seller, other_seller):
        resp = client.get("/api/sellers")
        assert resp.status_code == 200
        assert {s["id"] for s in resp.json()} == {seller.id, other_seller.id}

    def test_get_seller(self, client, seller, buyer):
        assert client.get(f"/api/sellers/{seller.id}").json()["name"] == "Patna Steel Traders"
        assert client.get(f"/api/sellers/{buyer.id}").status_code == 404


class TestUsers:
    def test_list_users(self, client, buyer, seller):
        resp = client.get("/api/users")
        assert resp.status_code == 200
        users = resp.json()
        assert {u["role"] for u in users} == {"Buyer", "Seller"}
        assert all("password_hash" not in u for u in users)
