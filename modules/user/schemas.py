"""
User Module - Schemas
======================
Public view of a user account; the password hash is never part of it.
"""

from datetime import datetime
from typing import Optional

from common.schemas import CamelModel
from modules.user.models import UserRole


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    role: UserRole
    enabled: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
