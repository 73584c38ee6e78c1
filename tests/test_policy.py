"""
Unit Tests: modules.auth.policy

- Path glob compilation
- Route matrix: public / authenticated / ADMIN / self-or-admin
- CSRF exemption set
"""

import pytest

from common.exceptions import Forbidden, Unauthenticated
from modules.auth.policy import (
    compile_pattern, authorize, is_csrf_exempt, resolve, build_rules, Requirement,
)
from modules.auth.principal import UserPrincipal


def principal(user_id=1, role="USER"):
    return UserPrincipal(
        user_id=user_id, username=f"user{user_id}", email=f"user{user_id}@example.com",
        role=role, authorities={f"ROLE_{role}"},
    )


USER = principal(1, "USER")
ADMIN = principal(99, "ADMIN")


class TestPatterns:

    @pytest.mark.parametrize("path,matches", [
        ("/api/products", True),
        ("/api/products/", True),
        ("/api/products/5", True),
        ("/api/products/5/images", True),
        ("/api/productsX", False),
        ("/api/product", False),
    ])
    def test_double_star(self, path, matches):
        assert bool(compile_pattern("/api/products/**").match(path)) is matches

    def test_path_variable_captures_one_segment(self):
        regex = compile_pattern("/api/users/{id}")
        assert regex.match("/api/users/42").groupdict() == {"id": "42"}
        assert regex.match("/api/users/42/status") is None

    def test_catch_all(self):
        regex = compile_pattern("/**")
        assert regex.match("/anything/at/all")
        assert regex.match("")


class TestAuthorize:

    @pytest.mark.parametrize("method,path", [
        ("GET", "/"),
        ("GET", "/health"),
        ("GET", "/api/csrf"),
        ("POST", "/api/auth/login"),
        ("POST", "/api/auth/register"),
        ("POST", "/api/auth/refresh"),
        ("POST", "/api/auth/logout"),
        ("GET", "/api/products"),
        ("GET", "/api/products/3"),
        ("GET", "/api/categories/top-level"),
        ("GET", "/api/categories/1/children"),
    ])
    def test_public_routes_need_no_principal(self, method, path):
        authorize(method, path, None)

    @pytest.mark.parametrize("method,path", [
        ("POST", "/api/products"),
        ("PUT", "/api/products/1"),
        ("DELETE", "/api/products/1"),
        ("POST", "/api/categories"),
        ("DELETE", "/api/categories/1"),
        ("GET", "/api/users"),
        ("PATCH", "/api/users/1/status"),
    ])
    def test_admin_routes(self, method, path):
        with pytest.raises(Unauthenticated):
            authorize(method, path, None)
        with pytest.raises(Forbidden):
            authorize(method, path, USER)
        authorize(method, path, ADMIN)

    @pytest.mark.parametrize("method,path", [
        ("GET", "/api/cart"),
        ("POST", "/api/cart/items"),
        ("PUT", "/api/cart/items/3"),
        ("DELETE", "/api/cart"),
    ])
    def test_cart_needs_any_principal(self, method, path):
        with pytest.raises(Unauthenticated):
            authorize(method, path, None)
        authorize(method, path, USER)
        authorize(method, path, ADMIN)

    def test_user_may_read_own_account_only(self):
        authorize("GET", "/api/users/1", USER)
        authorize("GET", "/api/users/2", ADMIN)
        with pytest.raises(Forbidden):
            authorize("GET", "/api/users/2", USER)
        with pytest.raises(Unauthenticated):
            authorize("GET", "/api/users/1", None)

    def test_enabled_listing_is_admin_only(self):
        with pytest.raises(Forbidden):
            authorize("GET", "/api/users/enabled", USER)
        authorize("GET", "/api/users/enabled", ADMIN)

    def test_unmatched_paths_need_authentication(self):
        with pytest.raises(Unauthenticated):
            authorize("GET", "/api/orders", None)
        authorize("GET", "/api/orders", USER)

    def test_docs_public_only_in_debug(self):
        rule, _ = resolve("GET", "/docs", build_rules(debug=True))
        assert rule.requirement == Requirement.PUBLIC

        rule, _ = resolve("GET", "/docs", build_rules(debug=False))
        assert rule.requirement == Requirement.AUTHENTICATED

    def test_first_match_wins(self):
        rule, variables = resolve("GET", "/api/users/5")
        assert rule.requirement == Requirement.SELF_OR_ADMIN
        assert variables == {"id": "5"}

        rule, _ = resolve("DELETE", "/api/users/5")
        assert rule.requirement == Requirement.ADMIN


class TestCsrfExemptions:

    @pytest.mark.parametrize("method,path", [
        ("POST", "/api/auth/login"),
        ("POST", "/api/auth/refresh"),
        ("POST", "/api/cart/items"),
        ("DELETE", "/api/cart"),
        ("PUT", "/api/products/1"),
        ("DELETE", "/api/categories/1"),
    ])
    def test_exempt(self, method, path):
        assert is_csrf_exempt(method, path) is True

    @pytest.mark.parametrize("method,path", [
        ("PATCH", "/api/users/1/status"),
        ("DELETE", "/api/users/1"),
        ("POST", "/api/orders"),
    ])
    def test_protected(self, method, path):
        assert is_csrf_exempt(method, path) is False
