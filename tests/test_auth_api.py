"""
API Tests: /api/auth

- register: 201, role USER, refresh cookie, duplicates, validation boundaries
- login: exact-case username, wrong password, disabled account
- refresh: missing / valid / expired / garbage cookie, rotation
- logout: clearing cookie
"""

from common.security import extract_username, extract_user_id, parse_token, _create_token
from modules.user.models import User
from conftest import make_user, DEFAULT_PASSWORD

PROBLEM_JSON = "application/problem+json"


def register_body(**overrides):
    body = {
        "username": "alice",
        "email": "a@x.io",
        "password": "pw-12345",
        "fullName": "Alice Example",
    }
    body.update(overrides)
    return body


def refresh_cookie_header(response) -> str:
    headers = [v for v in response.headers.get_list("set-cookie") if v.startswith("refreshToken=")]
    assert len(headers) == 1
    return headers[0]


# ==========================================
# Register
# ==========================================

class TestRegister:

    def test_register_creates_user_and_sets_cookie(self, client, db):
        response = client.post("/api/auth/register", json=register_body())

        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "USER"
        assert body["username"] == "alice"
        assert body["email"] == "a@x.io"
        assert body["token"]
        assert "refreshToken" not in body

        cookie = refresh_cookie_header(response).lower()
        assert "httponly" in cookie
        assert "max-age=604800" in cookie
        assert "samesite=none" in cookie
        assert "path=/" in cookie

        user = db.query(User).filter(User.username == "alice").one()
        assert user.enabled is True
        assert user.password_hash != "pw-12345"

    def test_register_tokens_identify_the_new_user(self, client, db):
        response = client.post("/api/auth/register", json=register_body())
        token = response.json()["token"]
        user = db.query(User).filter(User.username == "alice").one()

        assert extract_username(token) == "alice"
        assert extract_user_id(token) == user.id
        assert parse_token(response.cookies["refreshToken"])["sub"] == "alice"

    def test_duplicate_username_ignores_case(self, client):
        client.post("/api/auth/register", json=register_body())
        response = client.post("/api/auth/register", json=register_body(username="ALICE", email="other@x.io"))

        assert response.status_code == 409
        assert response.headers["content-type"].startswith(PROBLEM_JSON)
        assert response.json()["type"].endswith("/duplicate-username")

    def test_duplicate_email_ignores_case(self, client):
        client.post("/api/auth/register", json=register_body())
        response = client.post("/api/auth/register", json=register_body(username="alice2", email="A@X.IO"))

        assert response.status_code == 409
        assert response.json()["type"].endswith("/duplicate-email")

    def test_password_length_boundary(self, client):
        short = client.post("/api/auth/register", json=register_body(password="pw-1234"))
        assert short.status_code == 400
        assert "password" in short.json()["errors"]

        ok = client.post("/api/auth/register", json=register_body(password="pw-12345"))
        assert ok.status_code == 201

    def test_invalid_email_rejected(self, client):
        response = client.post("/api/auth/register", json=register_body(email="not-an-email"))

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == 400
        assert body["type"].endswith("/validation-failed")
        assert "email" in body["errors"]

    def test_blank_fields_rejected(self, client):
        response = client.post("/api/auth/register", json=register_body(username="   ", fullName=""))

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert "username" in errors
        assert "fullName" in errors


# ==========================================
# Login
# ==========================================

class TestLogin:

    def test_login_then_access_cart(self, client, alice):
        response = client.post("/api/auth/login", json={"username": "alice", "password": DEFAULT_PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "USER"
        assert extract_username(body["token"]) == "alice"
        assert extract_user_id(body["token"]) == alice.id
        assert "refreshToken" not in body
        refresh_cookie_header(response)

        cart = client.get("/api/cart", headers={"Authorization": f"Bearer {body['token']}"})
        assert cart.status_code == 200
        assert cart.json()["items"] == []
        assert cart.json()["totalItems"] == 0

    def test_wrong_password(self, client, alice):
        response = client.post("/api/auth/login", json={"username": "alice", "password": "wrong-pass"})

        assert response.status_code == 401
        assert response.json()["type"].endswith("/invalid-credentials")
        assert response.json()["detail"] == "Invalid username or password"

    def test_unknown_user(self, client):
        response = client.post("/api/auth/login", json={"username": "ghost", "password": DEFAULT_PASSWORD})
        assert response.status_code == 401

    def test_username_is_case_sensitive_on_login(self, client, alice):
        response = client.post("/api/auth/login", json={"username": "ALICE", "password": DEFAULT_PASSWORD})
        assert response.status_code == 401

    def test_disabled_account(self, client, db):
        make_user(db, "carol", enabled=False)
        response = client.post("/api/auth/login", json={"username": "carol", "password": DEFAULT_PASSWORD})

        assert response.status_code == 401
        assert response.json()["detail"] == "Account is disabled"

    def test_blank_credentials_rejected(self, client):
        response = client.post("/api/auth/login", json={"username": "", "password": ""})
        assert response.status_code == 400


# ==========================================
# Refresh & Logout
# ==========================================

class TestRefresh:

    def test_missing_cookie(self, client):
        response = client.post("/api/auth/refresh")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/unauthenticated")

    def test_valid_cookie_rotates_tokens(self, client, alice):
        login = client.post("/api/auth/login", json={"username": "alice", "password": DEFAULT_PASSWORD})
        client.cookies.set("refreshToken", login.cookies["refreshToken"])

        response = client.post("/api/auth/refresh")

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "alice"
        assert extract_user_id(body["token"]) == alice.id
        assert "refreshToken" not in body
        cookie = refresh_cookie_header(response)
        assert "max-age=604800" in cookie.lower()
        assert parse_token(response.cookies["refreshToken"])["sub"] == "alice"

    def test_expired_cookie(self, client, alice):
        client.cookies.set("refreshToken", _create_token({"userId": alice.id}, "alice", -1000))
        response = client.post("/api/auth/refresh")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/invalid-token")

    def test_garbage_cookie(self, client):
        client.cookies.set("refreshToken", "garbage")
        assert client.post("/api/auth/refresh").status_code == 401

    def test_disabled_user_cannot_refresh(self, client, db):
        carol = make_user(db, "carol", enabled=False)
        client.cookies.set("refreshToken", _create_token({"userId": carol.id}, "carol", 60000))

        assert client.post("/api/auth/refresh").status_code == 401

    def test_refresh_token_is_not_a_bearer_credential(self, client, alice):
        login = client.post("/api/auth/login", json={"username": "alice", "password": DEFAULT_PASSWORD})
        refresh_token = login.cookies["refreshToken"]

        response = client.get("/api/cart", headers={"Authorization": f"Bearer {refresh_token}"})
        assert response.status_code == 401


class TestLogout:

    def test_logout_clears_cookie(self, client):
        response = client.post("/api/auth/logout")

        assert response.status_code == 200
        cookie = refresh_cookie_header(response).lower()
        assert "max-age=0" in cookie
        assert "httponly" in cookie
