"""
Auth Module - Dependencies
===========================
FastAPI dependencies exposing the principal installed by the security
pipeline in main.py. Route handlers take the user id from here, never from
the request body.
"""

from typing import Optional

from fastapi import Request

from common.exceptions import Unauthenticated
from modules.auth.principal import UserPrincipal


def get_principal(request: Request) -> Optional[UserPrincipal]:
    """The authenticated principal of this request, or None."""
    return getattr(request.state, "principal", None)


def require_principal(request: Request) -> UserPrincipal:
    """Require an authenticated principal. Raises Unauthenticated otherwise."""
    principal = get_principal(request)
    if principal is None:
        raise Unauthenticated()
    return principal
