"""
Pytest configuration and fixtures for tests.

Environment is pinned before any project import so config.settings reads
test values: in-memory SQLite, non-secure cookies (the TestClient speaks
plain http) and the cheapest bcrypt cost.
"""

import os
import sys
from decimal import Decimal

os.environ["APP_PROFILE"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-" + "0123456789abcdef" * 5
os.environ["COOKIE_SECURE"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from config.database import get_db, enable_sqlite_foreign_keys, create_schema, drop_schema  # noqa: E402
from common.security import hash_password, create_access_token  # noqa: E402
from main import app  # noqa: E402
from modules.user.models import User, UserRole  # noqa: E402
from modules.catalog.models import Category, Product  # noqa: E402

DEFAULT_PASSWORD = "password123"


# ============================================================================
# Database Fixtures
# ============================================================================

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(test_engine, "connect", enable_sqlite_foreign_keys)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db():
    """Fresh schema per test; setup helpers commit so request sessions see their rows."""
    create_schema(test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_schema(test_engine)


@pytest.fixture
def client(db):
    """TestClient whose requests each get their own session on the test engine."""
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with_client = TestClient(app)
    try:
        yield with_client
    finally:
        app.dependency_overrides.clear()


# ============================================================================
# Entity Helpers
# ============================================================================

def make_user(db, username="alice", email=None, password=DEFAULT_PASSWORD,
              role=UserRole.USER, enabled=True) -> User:
    user = User(
        username=username,
        email=email or f"{username}@example.com",
        password_hash=hash_password(password),
        full_name=username.title(),
        role=role,
        enabled=enabled,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_category(db, name="Stationery", parent=None) -> Category:
    category = Category(name=name, parent_id=parent.id if parent else None, active=True)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def make_product(db, name="Pen", price="9.90", stock=3, active=True, category=None) -> Product:
    product = Product(
        name=name,
        price=Decimal(price),
        stock=stock,
        active=active,
        featured=False,
        category_id=category.id if category else None,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def bearer(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def alice(db):
    return make_user(db, "alice")


@pytest.fixture
def bob(db):
    return make_user(db, "bob")


@pytest.fixture
def admin(db):
    return make_user(db, "admin", role=UserRole.ADMIN)
