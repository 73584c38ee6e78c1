"""
Auth Module - Principal
========================
Turns an `Authorization: Bearer <token>` header into the authenticated
identity of the request. No header, a non-bearer scheme or a token that
fails validation all yield "no principal"; the authorization policy
decides whether the route tolerates that.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Set

from fastapi import Request

from common.exceptions import TokenInvalid
from common.security import parse_token

logger = logging.getLogger("fivepapa.security")

BEARER_PREFIX = "Bearer "
IDENTITY_CLAIMS = ("sub", "userId", "role")


@dataclass(frozen=True)
class UserPrincipal:
    user_id: int
    username: str
    email: Optional[str]
    role: str
    authorities: Set[str] = field(default_factory=set)

    @classmethod
    def from_claims(cls, claims: dict) -> "UserPrincipal":
        role = claims["role"]
        return cls(
            user_id=int(claims["userId"]),
            username=claims["sub"],
            email=claims.get("email"),
            role=role,
            authorities={f"ROLE_{role}"},
        )

    @property
    def is_admin(self) -> bool:
        return "ROLE_ADMIN" in self.authorities


def extract_principal(request: Request) -> Optional[UserPrincipal]:
    header = request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        return None

    token = header[len(BEARER_PREFIX):].strip()
    try:
        claims = parse_token(token)
    except TokenInvalid as e:
        logger.warning(f"Rejected bearer token on {request.method} {request.url.path}: {e.message}")
        return None

    # Refresh tokens carry no role and never authenticate a request
    missing = [name for name in IDENTITY_CLAIMS if claims.get(name) in (None, "")]
    if missing:
        logger.warning(
            f"Bearer token missing claim(s) {', '.join(missing)} on {request.method} {request.url.path}"
        )
        return None

    return UserPrincipal.from_claims(claims)
