"""
Catalog Module - Service Layer
================================
Business logic for Categories (two-level tree) and Products.
Response views are assembled here so product counts and children come
from explicit repository queries.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from common.exceptions import (
    CategoryNotFound, ProductNotFound, DuplicateCategoryName,
    CategoryInUse, CategoryDepthExceeded, CategoryCycle,
)
from common.helpers import to_money
from modules.cart.repository import CartItemRepository
from modules.catalog.models import Category, Product
from modules.catalog.repository import CategoryRepository, ProductRepository
from modules.catalog.schemas import (
    CategoryRequest, CategoryResponse, CategorySimpleResponse,
    ProductRequest, ProductResponse,
)

logger = logging.getLogger("fivepapa.catalog")


# ==========================================
# 🗂️ Category Service
# ==========================================

class CategoryService:

    def to_response(self, db: Session, category: Category) -> CategoryResponse:
        children = CategoryRepository.find_by_parent_id(db, category.id)
        counts = CategoryRepository.product_counts(db, [category.id] + [c.id for c in children])
        return CategoryResponse(
            id=category.id,
            name=category.name,
            description=category.description,
            parent_id=category.parent_id,
            parent_name=category.parent.name if category.parent else None,
            children=[
                CategorySimpleResponse(
                    id=c.id, name=c.name, description=c.description,
                    active=c.active, product_count=counts.get(c.id, 0),
                )
                for c in children
            ],
            active=category.active,
            created_at=category.created_at,
            updated_at=category.updated_at,
            is_top_level=category.is_top_level,
            product_count=counts.get(category.id, 0),
        )

    def get(self, db: Session, category_id: int) -> Category:
        category = CategoryRepository.find_by_id(db, category_id)
        if not category:
            raise CategoryNotFound(category_id)
        return category

    def list_all(self, db: Session) -> List[Category]:
        return CategoryRepository.find_all(db)

    def list_top_level(self, db: Session) -> List[Category]:
        return CategoryRepository.find_by_parent_is_null(db)

    def list_children(self, db: Session, parent_id: int) -> List[Category]:
        self.get(db, parent_id)
        return CategoryRepository.find_by_parent_id(db, parent_id)

    def _resolve_parent(self, db: Session, parent_id: Optional[int]) -> Optional[Category]:
        if parent_id is None:
            return None
        parent = self.get(db, parent_id)
        if not parent.is_top_level:
            raise CategoryDepthExceeded("Parent category must be a top-level category")
        return parent

    def _save(self, db: Session, category: Category):
        # categories.name is UNIQUE; a concurrent writer can win after the existence check
        name = category.name
        try:
            CategoryRepository.save(db, category)
        except IntegrityError:
            db.rollback()
            raise DuplicateCategoryName(name)

    def create(self, db: Session, req: CategoryRequest) -> Category:
        name = req.name.strip()
        if CategoryRepository.exists_by_name(db, name):
            raise DuplicateCategoryName(name)

        parent = self._resolve_parent(db, req.parent_id)
        category = Category(
            name=name,
            description=req.description,
            parent_id=parent.id if parent else None,
            active=True if req.active is None else req.active,
        )
        self._save(db, category)
        db.refresh(category)
        logger.info(f"Category created: {category.name} (id={category.id})")
        return category

    def update(self, db: Session, category_id: int, req: CategoryRequest) -> Category:
        """
        Name stays unique excluding self; a null parentId moves the category
        to the top level; a category with children cannot get a parent.
        Like create, an omitted active flag means active.
        """
        category = self.get(db, category_id)
        name = req.name.strip()
        if CategoryRepository.exists_by_name_and_id_not(db, name, category_id):
            raise DuplicateCategoryName(name)

        if req.parent_id is not None:
            if req.parent_id == category_id:
                raise CategoryCycle()
            parent = self._resolve_parent(db, req.parent_id)
            if CategoryRepository.has_children(db, category_id):
                raise CategoryDepthExceeded("A category with subcategories cannot become a subcategory")
            category.parent_id = parent.id
        else:
            category.parent_id = None

        category.name = name
        category.description = req.description
        category.active = True if req.active is None else req.active

        self._save(db, category)
        db.refresh(category)
        return category

    def delete(self, db: Session, category_id: int):
        category = self.get(db, category_id)
        if CategoryRepository.has_children(db, category_id):
            raise CategoryInUse("Cannot delete category with subcategories")
        if CategoryRepository.count_products(db, category_id) > 0:
            raise CategoryInUse("Cannot delete category with products")
        CategoryRepository.delete(db, category)
        logger.info(f"Category deleted: {category_id}")


# ==========================================
# 📦 Product Service
# ==========================================

class ProductService:

    def to_response(self, product: Product) -> ProductResponse:
        return ProductResponse(
            id=product.id,
            name=product.name,
            description=product.description,
            price=to_money(product.price),
            stock=product.stock,
            image_url=product.image_url,
            active=product.active,
            featured=product.featured,
            category_id=product.category_id,
            category_name=product.category.name if product.category else None,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )

    def get(self, db: Session, product_id: int) -> Product:
        product = ProductRepository.find_by_id(db, product_id)
        if not product:
            raise ProductNotFound(product_id)
        return product

    def search(
        self, db: Session,
        keyword: Optional[str] = None,
        active: Optional[bool] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
    ) -> List[Product]:
        return ProductRepository.search(db, keyword, active, min_price, max_price)

    def _apply(self, db: Session, product: Product, req: ProductRequest):
        if req.category_id is not None and not CategoryRepository.find_by_id(db, req.category_id):
            raise CategoryNotFound(req.category_id)
        product.name = req.name.strip()
        product.description = req.description
        product.price = to_money(req.price)
        product.stock = req.stock
        product.image_url = req.image_url
        product.category_id = req.category_id
        product.active = req.active
        product.featured = req.featured

    def create(self, db: Session, req: ProductRequest) -> Product:
        product = Product()
        self._apply(db, product, req)
        ProductRepository.save(db, product)
        db.refresh(product)
        logger.info(f"Product created: {product.name} (id={product.id})")
        return product

    def update(self, db: Session, product_id: int, req: ProductRequest) -> Product:
        product = self.get(db, product_id)
        self._apply(db, product, req)
        ProductRepository.save(db, product)
        db.refresh(product)
        return product

    def delete(self, db: Session, product_id: int):
        """Cart lines pointing at the product go first."""
        product = self.get(db, product_id)
        removed = CartItemRepository.delete_by_product_id(db, product_id)
        ProductRepository.delete(db, product)
        logger.info(f"Product deleted: {product_id} (removed from {removed} cart(s))")


category_service = CategoryService()
product_service = ProductService()
