"""
Auth Module - Routes
=====================
Register, login, refresh and logout. The refresh token only ever travels in
the HttpOnly `refreshToken` cookie; JSON bodies carry the access token.
"""

from fastapi import APIRouter, Request, Response, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import REFRESH_TOKEN_COOKIE
from common.security import set_refresh_cookie, clear_refresh_cookie
from modules.auth.schemas import RegisterRequest, LoginRequest, LoginResponse
from modules.auth.service import auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token_body(response: Response, result: LoginResponse) -> LoginResponse:
    """Move the refresh token from the body into the cookie."""
    set_refresh_cookie(response, result.refresh_token)
    result.refresh_token = None
    return result


@router.post("/register", response_model=LoginResponse, status_code=201, response_model_exclude_none=True)
def register(
    req: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    result = auth_service.register(db, req)
    db.commit()
    return _token_body(response, result)


@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True)
def login(
    req: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    result = auth_service.login(db, req)
    return _token_body(response, result)


@router.post("/refresh", response_model=LoginResponse, response_model_exclude_none=True)
def refresh(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    result = auth_service.refresh(db, request.cookies.get(REFRESH_TOKEN_COOKIE))
    return _token_body(response, result)


@router.post("/logout")
def logout(response: Response):
    """Stateless: only the cookie is cleared."""
    clear_refresh_cookie(response)
    return {"message": "Logged out successfully"}
