"""
Auth Module - Schemas
======================
Register/login payloads and the token response.
"""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from config.settings import PASSWORD_MIN_LENGTH
from common.schemas import CamelModel, not_blank


class RegisterRequest(CamelModel):
    username: str = Field(..., max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=72)
    full_name: str = Field(..., max_length=100)
    phone_number: Optional[str] = Field(None, max_length=30)

    @field_validator("username", "password", "full_name")
    @classmethod
    def check_not_blank(cls, value):
        return not_blank(value)


class LoginRequest(CamelModel):
    username: str
    password: str

    @field_validator("username", "password")
    @classmethod
    def check_not_blank(cls, value):
        return not_blank(value)


class LoginResponse(CamelModel):
    """refresh_token travels in the HttpOnly cookie and is stripped before the body is sent."""
    token: str
    refresh_token: Optional[str] = None
    username: str
    email: str
    role: str
