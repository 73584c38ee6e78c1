"""
5dpapa Backend - Create / Promote Admin
========================================
The only way to obtain the ADMIN role: registration always creates USER
accounts.

Usage:
    python scripts/create_admin.py <username> <email>

If the username already exists the account is promoted (and enabled);
otherwise a new ADMIN account is created with a password read from the
terminal.
"""

import sys
import os
from getpass import getpass

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.database import SessionLocal
from config.settings import PASSWORD_MIN_LENGTH
from common.security import hash_password
from modules.user.models import User, UserRole
from modules.user.repository import UserRepository
from scripts.init_db import init_db


def create_admin(db, username: str, email: str, password: str = None) -> User:
    user = UserRepository.find_by_username_ignore_case(db, username)
    if user:
        user.role = UserRole.ADMIN
        user.enabled = True
        UserRepository.save(db, user)
        print(f"Promoted existing user '{user.username}' to ADMIN.")
        return user

    if UserRepository.exists_by_email_ignore_case(db, email):
        raise ValueError(f"Email already in use: {email}")
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        full_name="Administrator",
        role=UserRole.ADMIN,
        enabled=True,
    )
    UserRepository.save(db, user)
    print(f"Created ADMIN user '{username}' (id={user.id}).")
    return user


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(1)

    username, email = sys.argv[1], sys.argv[2]
    init_db()

    db = SessionLocal()
    try:
        password = None
        if not UserRepository.find_by_username_ignore_case(db, username):
            password = getpass("Password: ")
            if password != getpass("Repeat password: "):
                print("Passwords do not match.")
                sys.exit(1)
        create_admin(db, username, email, password)
        db.commit()
    except ValueError as e:
        db.rollback()
        print(f"[ERROR] {e}")
        sys.exit(1)
    finally:
        db.close()
