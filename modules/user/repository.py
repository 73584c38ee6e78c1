"""
User Module - Repository
=========================
Data access for User: by id, by username/email (exact and case-insensitive),
by enabled flag, save and delete.
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from modules.user.models import User


class UserRepository:

    @staticmethod
    def find_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.get(User, user_id)

    @staticmethod
    def find_all(db: Session) -> List[User]:
        return db.query(User).order_by(User.id.asc()).all()

    @staticmethod
    def find_by_enabled(db: Session, enabled: bool) -> List[User]:
        return db.query(User).filter(User.enabled == enabled).order_by(User.id.asc()).all()

    @staticmethod
    def find_by_username(db: Session, username: str) -> Optional[User]:
        """Exact-case lookup (used by login and refresh)."""
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def find_by_username_ignore_case(db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.username) == username.lower()).first()

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def find_by_email_ignore_case(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()

    @staticmethod
    def exists_by_id(db: Session, user_id: int) -> bool:
        return db.query(User.id).filter(User.id == user_id).first() is not None

    @staticmethod
    def exists_by_username_ignore_case(db: Session, username: str) -> bool:
        return db.query(User.id).filter(func.lower(User.username) == username.lower()).first() is not None

    @staticmethod
    def exists_by_email_ignore_case(db: Session, email: str) -> bool:
        return db.query(User.id).filter(func.lower(User.email) == email.lower()).first() is not None

    @staticmethod
    def save(db: Session, user: User) -> User:
        db.add(user)
        db.flush()
        return user

    @staticmethod
    def delete_by_id(db: Session, user_id: int):
        db.query(User).filter(User.id == user_id).delete(synchronize_session="fetch")
        db.flush()
