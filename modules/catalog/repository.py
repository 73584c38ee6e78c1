"""
Catalog Module - Repositories
===============================
Data access for Category and Product. Child categories and product counts
are explicit queries rather than in-memory back-references.
"""

from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from modules.catalog.models import Category, Product


class CategoryRepository:

    @staticmethod
    def find_by_id(db: Session, category_id: int) -> Optional[Category]:
        return db.get(Category, category_id)

    @staticmethod
    def find_all(db: Session) -> List[Category]:
        return db.query(Category).order_by(Category.id.asc()).all()

    @staticmethod
    def find_by_parent_is_null(db: Session) -> List[Category]:
        return db.query(Category).filter(Category.parent_id.is_(None)).order_by(Category.id.asc()).all()

    @staticmethod
    def find_by_parent_id(db: Session, parent_id: int) -> List[Category]:
        return db.query(Category).filter(Category.parent_id == parent_id).order_by(Category.id.asc()).all()

    @staticmethod
    def find_by_name(db: Session, name: str) -> Optional[Category]:
        return db.query(Category).filter(Category.name == name).first()

    @staticmethod
    def exists_by_name(db: Session, name: str) -> bool:
        return db.query(Category.id).filter(Category.name == name).first() is not None

    @staticmethod
    def exists_by_name_and_id_not(db: Session, name: str, category_id: int) -> bool:
        return db.query(Category.id).filter(
            Category.name == name,
            Category.id != category_id,
        ).first() is not None

    @staticmethod
    def has_children(db: Session, category_id: int) -> bool:
        return db.query(Category.id).filter(Category.parent_id == category_id).first() is not None

    @staticmethod
    def count_products(db: Session, category_id: int) -> int:
        return db.query(func.count(Product.id)).filter(Product.category_id == category_id).scalar() or 0

    @staticmethod
    def product_counts(db: Session, category_ids: List[int]) -> Dict[int, int]:
        """Batch {category_id: product_count} lookup."""
        if not category_ids:
            return {}
        rows = db.query(Product.category_id, func.count(Product.id)).filter(
            Product.category_id.in_(category_ids),
        ).group_by(Product.category_id).all()
        return {cid: cnt for cid, cnt in rows}

    @staticmethod
    def save(db: Session, category: Category) -> Category:
        db.add(category)
        db.flush()
        return category

    @staticmethod
    def delete(db: Session, category: Category):
        db.delete(category)
        db.flush()


class ProductRepository:

    @staticmethod
    def find_by_id(db: Session, product_id: int) -> Optional[Product]:
        return db.get(Product, product_id)

    @staticmethod
    def exists_by_id(db: Session, product_id: int) -> bool:
        return db.query(Product.id).filter(Product.id == product_id).first() is not None

    @staticmethod
    def search(
        db: Session,
        keyword: Optional[str] = None,
        active: Optional[bool] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
    ) -> List[Product]:
        """
        Combined lookup: name substring, active flag and price range.
        Every filter is optional; no filters returns all products.
        """
        q = db.query(Product)
        if keyword:
            q = q.filter(Product.name.contains(keyword, autoescape=True))
        if active is not None:
            q = q.filter(Product.active == active)
        if min_price is not None:
            q = q.filter(Product.price >= min_price)
        if max_price is not None:
            q = q.filter(Product.price <= max_price)
        return q.order_by(Product.id.asc()).all()

    @staticmethod
    def save(db: Session, product: Product) -> Product:
        db.add(product)
        db.flush()
        return product

    @staticmethod
    def delete(db: Session, product: Product):
        db.delete(product)
        db.flush()
