"""
5dpapa Backend - Database Configuration
=========================================
Engine, SessionLocal, Base, and get_db dependency.
All models across all modules inherit from this Base.
"""

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.orm import sessionmaker, declarative_base
from config.settings import DATABASE_URL


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores FOREIGN KEY clauses unless switched on per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
else:
    engine = create_engine(
        DATABASE_URL,
        pool_size=20,
        max_overflow=40,
        pool_timeout=30,
        pool_recycle=1800,  # Refresh connections every 30 minutes
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a database session, auto-closes after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_schema(bind=None):
    """Create every table registered on Base (existing tables are left alone)."""
    Base.metadata.create_all(bind=bind or engine)


def drop_schema(bind=None):
    """
    Drop every table registered on Base.

    categories.parent_id is ON DELETE RESTRICT, so subcategories are detached
    first; otherwise the implicit row delete of DROP TABLE fails on SQLite
    with foreign keys switched on.
    """
    bind = bind or engine
    categories = Base.metadata.tables.get("categories")
    if categories is not None:
        with bind.begin() as conn:
            if inspect(conn).has_table("categories"):
                conn.execute(categories.update().values(parent_id=None))
    Base.metadata.drop_all(bind=bind)
