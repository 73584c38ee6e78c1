"""
User Module - Service Layer
=============================
Admin-side account management: lookup, listing, enable/disable, delete.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from common.exceptions import UserNotFound
from modules.cart.repository import CartRepository
from modules.user.models import User
from modules.user.repository import UserRepository

logger = logging.getLogger("fivepapa.users")


class UserService:

    def get(self, db: Session, user_id: int) -> User:
        user = UserRepository.find_by_id(db, user_id)
        if not user:
            raise UserNotFound(user_id)
        return user

    def list_all(self, db: Session) -> List[User]:
        return UserRepository.find_all(db)

    def list_enabled(self, db: Session) -> List[User]:
        return UserRepository.find_by_enabled(db, True)

    def update_status(self, db: Session, user_id: int, enabled: bool) -> User:
        """Soft-disable (or re-enable) an account; disabled users cannot log in or refresh."""
        user = self.get(db, user_id)
        user.enabled = enabled
        UserRepository.save(db, user)
        db.refresh(user)
        logger.info(f"User {user.username} {'enabled' if enabled else 'disabled'}")
        return user

    def delete(self, db: Session, user_id: int):
        """The user's cart (and its lines) goes with the account."""
        if not UserRepository.exists_by_id(db, user_id):
            raise UserNotFound(user_id)
        CartRepository.delete_by_user_id(db, user_id)
        UserRepository.delete_by_id(db, user_id)
        logger.info(f"User deleted: {user_id}")


user_service = UserService()
