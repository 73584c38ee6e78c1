"""
5dpapa Backend - Security Utilities
=====================================
JWT tokens (HS512), password hashing, refresh/CSRF cookies and the
double-submit CSRF check.

NOTE: Stateless design: tokens are never stored server-side; expiry is
the only invalidation. Refresh rotates both tokens.
"""

import hmac
import logging
import secrets
from datetime import timedelta
from typing import Any, Optional

from fastapi import Request, Response
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from config.settings import (
    JWT_SECRET, JWT_ALGORITHM, JWT_MIN_SECRET_BYTES,
    JWT_EXPIRATION_MS, JWT_REFRESH_EXPIRATION_MS,
    REFRESH_TOKEN_COOKIE, REFRESH_TOKEN_EXPIRATION_DAYS, COOKIE_SECURE,
    BCRYPT_ROUNDS, CSRF_COOKIE, CSRF_HEADER,
)
from common.exceptions import TokenInvalid, CsrfInvalid
from common.helpers import now_utc

logger = logging.getLogger("fivepapa.security")

if len(JWT_SECRET.encode("utf-8")) < JWT_MIN_SECRET_BYTES:
    logger.warning(
        f"JWT_SECRET is shorter than {JWT_MIN_SECRET_BYTES} bytes; use a longer key for {JWT_ALGORITHM}"
    )


# ==========================================
# Passwords
# ==========================================

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time compare happens inside the bcrypt verifier."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


# ==========================================
# JWT Tokens
# ==========================================

def _signing_key() -> bytes:
    return JWT_SECRET.encode("utf-8")


def _create_token(claims: dict, subject: str, ttl_ms: int) -> str:
    now = now_utc().replace(microsecond=0)
    to_encode = dict(claims)
    to_encode["sub"] = subject
    to_encode["iat"] = now
    to_encode["exp"] = now + timedelta(milliseconds=ttl_ms)
    return jwt.encode(to_encode, _signing_key(), algorithm=JWT_ALGORITHM)


def create_access_token(user) -> str:
    """Short-lived bearer token carrying the identity and role."""
    claims = {
        "userId": user.id,
        "email": user.email,
        "role": user.role.value,
    }
    return _create_token(claims, user.username, JWT_EXPIRATION_MS)


def create_refresh_token(user) -> str:
    """Long-lived token, only ever sent back through the refresh cookie."""
    return _create_token({"userId": user.id}, user.username, JWT_REFRESH_EXPIRATION_MS)


def parse_token(token: str) -> dict:
    """
    Verify signature and expiry and return all claims.
    Raises TokenInvalid on bad signature, malformed token or expiry.
    """
    if not token:
        raise TokenInvalid("Token is missing")
    try:
        return jwt.decode(token, _signing_key(), algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenInvalid("Token has expired")
    except JWTError:
        raise TokenInvalid("Token is invalid")


def extract_claim(token: str, field: str) -> Any:
    return parse_token(token).get(field)


def extract_username(token: str) -> Optional[str]:
    return extract_claim(token, "sub")


def extract_user_id(token: str) -> Optional[int]:
    return extract_claim(token, "userId")


def is_token_valid(token: str) -> bool:
    try:
        claims = parse_token(token)
    except TokenInvalid:
        return False
    return claims.get("exp", 0) > now_utc().timestamp()


# ==========================================
# Cookie Helpers
# ==========================================

def get_refresh_cookie_kwargs() -> dict:
    """Cookie settings for the refresh token (cross-site SPA, hence SameSite=None)."""
    return dict(
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="none",
        path="/",
        max_age=REFRESH_TOKEN_EXPIRATION_DAYS * 24 * 60 * 60,
    )


def set_refresh_cookie(response: Response, refresh_token: str):
    response.set_cookie(REFRESH_TOKEN_COOKIE, refresh_token, **get_refresh_cookie_kwargs())


def clear_refresh_cookie(response: Response):
    kwargs = get_refresh_cookie_kwargs()
    kwargs["max_age"] = 0
    response.set_cookie(REFRESH_TOKEN_COOKIE, "", **kwargs)


# ==========================================
# CSRF (double-submit cookie)
# ==========================================

CSRF_PROTECTED_METHODS = ("POST", "PUT", "PATCH", "DELETE")


def new_csrf_token() -> str:
    """Generate a new random CSRF token."""
    return secrets.token_urlsafe(32)


def set_csrf_cookie(response: Response, token: str):
    """Readable by scripts so the client can echo it in the X-XSRF-TOKEN header."""
    response.set_cookie(CSRF_COOKIE, token, httponly=False, secure=COOKIE_SECURE, samesite=None, path="/")
    response.headers[CSRF_HEADER] = token


def has_bearer_credentials(request: Request) -> bool:
    return request.headers.get("Authorization", "").startswith("Bearer ")


def csrf_check(request: Request):
    """
    Verify the X-XSRF-TOKEN header echoes the XSRF-TOKEN cookie.
    Raises CsrfInvalid on mismatch.
    """
    cookie_token = request.cookies.get(CSRF_COOKIE)
    header_token = request.headers.get(CSRF_HEADER)

    if not cookie_token or not header_token or not hmac.compare_digest(cookie_token.encode(), header_token.encode()):
        raise CsrfInvalid()
