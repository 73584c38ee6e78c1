"""
API Tests: application-level endpoints and cross-cutting behavior

- banner, health, CSRF token issuance
- CORS allow-list
- problem documents for unknown routes, wrong methods, malformed bodies
"""

from conftest import bearer


class TestPublicEndpoints:

    def test_banner(self, client):
        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "running"
        assert body["profile"] == "test"
        assert body["endpoints"]["login"] == "/api/auth/login"
        assert "docs" not in body["endpoints"]

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "UP"
        assert response.json()["timestamp"]

    def test_csrf_token(self, client):
        response = client.get("/api/csrf")

        assert response.status_code == 200
        body = response.json()
        assert body["headerName"] == "X-XSRF-TOKEN"
        assert body["parameterName"] == "_csrf"
        assert response.headers["X-XSRF-TOKEN"] == body["token"]
        assert response.cookies["XSRF-TOKEN"] == body["token"]

        cookie = [v for v in response.headers.get_list("set-cookie") if v.startswith("XSRF-TOKEN=")][0]
        assert "httponly" not in cookie.lower()

    def test_docs_hidden_outside_dev(self, client):
        assert client.get("/openapi.json").status_code == 401


class TestCors:

    def test_preflight_from_localhost(self, client):
        response = client.options("/api/cart/items", headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        })

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_preflight_from_unknown_origin(self, client):
        response = client.options("/api/cart/items", headers={
            "Origin": "https://evil.example.com",
            "Access-Control-Request-Method": "POST",
        })

        assert response.status_code == 400
        assert "access-control-allow-origin" not in response.headers

    def test_simple_request_exposes_csrf_header(self, client):
        response = client.get("/api/csrf", headers={"Origin": "https://elvis1056.github.io"})

        assert response.headers["access-control-allow-origin"] == "https://elvis1056.github.io"
        assert "x-xsrf-token" in response.headers["access-control-expose-headers"].lower()

    def test_lookalike_origin_rejected(self, client):
        response = client.get("/health", headers={"Origin": "http://localhost.evil.com"})
        assert "access-control-allow-origin" not in response.headers


class TestProblemDocuments:

    def test_unknown_route(self, client, alice):
        response = client.get("/api/nothing-here", headers=bearer(alice))

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["type"].endswith("/not-found")
        assert body["title"] == "Not Found"
        assert body["instance"] == "/api/nothing-here"

    def test_wrong_method(self, client, alice):
        response = client.patch("/api/cart", headers=bearer(alice))

        assert response.status_code == 405
        assert response.json()["type"].endswith("/method-not-allowed")

    def test_malformed_json(self, client, alice):
        response = client.post(
            "/api/cart/items",
            content=b"{not json",
            headers={**bearer(alice), "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["type"].endswith("/validation-failed")

    def test_invalid_path_parameter(self, client, alice):
        response = client.put("/api/cart/items/abc", json={"quantity": 1}, headers=bearer(alice))

        assert response.status_code == 400
        assert "item_id" in response.json()["errors"]
