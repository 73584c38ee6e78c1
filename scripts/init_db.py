"""
5dpapa Backend - Database Initialization
==========================================
Creates the shop schema (users, categories, products, carts, cart_items).
Existing tables are left alone, so re-running is harmless; Alembic stays the
tool for schema changes on a live database.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --drop   # Drop and recreate all tables
"""

import sys
import os
from typing import List

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import inspect

from config.database import create_schema, drop_schema, engine

# Import ALL models so Base.metadata knows about them
from modules.user.models import User  # noqa
from modules.catalog.models import Category, Product  # noqa
from modules.cart.models import Cart, CartItem  # noqa


def init_db(bind=None, drop_first: bool = False) -> List[str]:
    """Create (optionally after dropping) the schema and return the table names now present."""
    bind = bind or engine
    if drop_first:
        drop_schema(bind)
    create_schema(bind)
    return sorted(inspect(bind).get_table_names())


if __name__ == "__main__":
    drop = "--drop" in sys.argv
    if drop:
        confirm = input("This will DROP all shop tables, users and carts included. Type 'yes': ")
        if confirm.strip().lower() != "yes":
            print("Aborted.")
            sys.exit(0)

    tables = init_db(drop_first=drop)
    print(f"Schema ready on {engine.url.render_as_string(hide_password=True)}")
    print(f"Tables ({len(tables)}): {', '.join(tables)}")
