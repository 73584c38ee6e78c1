"""
Auth Module - Service Layer
=============================
Business logic for registration, login and refresh-token rotation.
Every success path mints a fresh access + refresh pair; the routes move the
refresh token into the HttpOnly cookie.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from common.exceptions import (
    DuplicateUsername, DuplicateEmail, InvalidCredentials, Unauthenticated,
)
from common.security import (
    hash_password, verify_password, create_access_token, create_refresh_token, extract_username,
)
from modules.auth.schemas import RegisterRequest, LoginRequest, LoginResponse
from modules.user.models import User, UserRole
from modules.user.repository import UserRepository

logger = logging.getLogger("fivepapa.auth")


class AuthService:
    """Handles all authentication logic: register, login, refresh and token issuance."""

    def issue_tokens(self, user: User) -> LoginResponse:
        return LoginResponse(
            token=create_access_token(user),
            refresh_token=create_refresh_token(user),
            username=user.username,
            email=user.email,
            role=user.role.value,
        )

    def register(self, db: Session, req: RegisterRequest) -> LoginResponse:
        """
        Create a USER account and log it in.

        Raises:
            DuplicateUsername / DuplicateEmail on a case-insensitive clash
        """
        username = req.username.strip()
        email = str(req.email).strip()

        if UserRepository.exists_by_username_ignore_case(db, username):
            raise DuplicateUsername(username)
        if UserRepository.exists_by_email_ignore_case(db, email):
            raise DuplicateEmail(email)

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(req.password),
            full_name=req.full_name.strip(),
            phone_number=req.phone_number,
            role=UserRole.USER,
            enabled=True,
        )
        try:
            UserRepository.save(db, user)
        except IntegrityError:
            db.rollback()
            # Race condition: a concurrent registration took the name or email
            if UserRepository.exists_by_username_ignore_case(db, username):
                raise DuplicateUsername(username)
            raise DuplicateEmail(email)

        logger.info(f"Registered user {user.username} (id={user.id})")
        return self.issue_tokens(user)

    def login(self, db: Session, req: LoginRequest) -> LoginResponse:
        """
        Exact-case username lookup, then password, then the enabled flag.

        Raises:
            InvalidCredentials for unknown user, wrong password or disabled account
        """
        user = UserRepository.find_by_username(db, req.username)
        if not user or not verify_password(req.password, user.password_hash):
            logger.info(f"Failed login for {req.username}")
            raise InvalidCredentials()
        if not user.enabled:
            logger.info(f"Login refused for disabled account {user.username}")
            raise InvalidCredentials("Account is disabled")

        logger.info(f"User {user.username} logged in")
        return self.issue_tokens(user)

    def refresh(self, db: Session, refresh_token: Optional[str]) -> LoginResponse:
        """
        Rotate both tokens from a valid refresh cookie.

        Raises:
            Unauthenticated if the cookie is absent
            TokenInvalid if it fails signature/expiry checks
            InvalidCredentials if the user vanished or was disabled
        """
        if not refresh_token:
            raise Unauthenticated("Refresh token is missing")

        username = extract_username(refresh_token)
        user = UserRepository.find_by_username(db, username) if username else None
        if not user or not user.enabled:
            logger.info(f"Refresh refused for {username}")
            raise InvalidCredentials("Account is disabled or no longer exists")

        logger.info(f"Refreshed tokens for {user.username}")
        return self.issue_tokens(user)


auth_service = AuthService()
