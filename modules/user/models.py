"""
User Module - User Model
==========================
Accounts with a single role (USER or ADMIN) and an enabled flag.
Username and email are unique case-insensitively (application check +
functional unique indexes).
"""

import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, Index, true
from sqlalchemy.sql import func
from config.database import Base


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # === Identity ===
    username = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)

    # === Profile ===
    full_name = Column(String(100), nullable=True)
    phone_number = Column(String(30), nullable=True)

    # === Access ===
    role = Column(Enum(UserRole, name="user_role"), default=UserRole.USER, nullable=False)
    enabled = Column(Boolean, default=True, server_default=true(), nullable=False, index=True)

    # === Audit ===
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User {self.username} ({self.role.value if self.role else '-'})>"


Index("uq_users_username_lower", func.lower(User.username), unique=True)
Index("uq_users_email_lower", func.lower(User.email), unique=True)
