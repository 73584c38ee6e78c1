"""
Catalog Routes
===============
Public product/category reads; ADMIN-only writes (enforced by the
authorization policy before the handler runs).
"""

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from config.database import get_db
from modules.catalog.schemas import CategoryRequest, CategoryResponse, ProductRequest, ProductResponse
from modules.catalog.service import category_service, product_service

product_router = APIRouter(prefix="/api/products", tags=["products"])
category_router = APIRouter(prefix="/api/categories", tags=["categories"])


# ==========================================
# 📦 Products
# ==========================================

@product_router.get("", response_model=List[ProductResponse])
def list_products(
    keyword: Optional[str] = None,
    active: Optional[bool] = None,
    min_price: Optional[Decimal] = Query(None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice"),
    db: Session = Depends(get_db),
):
    products = product_service.search(db, keyword, active, min_price, max_price)
    return [product_service.to_response(p) for p in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return product_service.to_response(product_service.get(db, product_id))


@product_router.post("", response_model=ProductResponse, status_code=201)
def create_product(req: ProductRequest, db: Session = Depends(get_db)):
    product = product_service.create(db, req)
    db.commit()
    return product_service.to_response(product)


@product_router.put("/{product_id}", response_model=ProductResponse)
def update_product(product_id: int, req: ProductRequest, db: Session = Depends(get_db)):
    product = product_service.update(db, product_id, req)
    db.commit()
    return product_service.to_response(product)


@product_router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product_service.delete(db, product_id)
    db.commit()
    return Response(status_code=204)


# ==========================================
# 🗂️ Categories
# ==========================================

@category_router.get("", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    return [category_service.to_response(db, c) for c in category_service.list_all(db)]


@category_router.get("/top-level", response_model=List[CategoryResponse])
def list_top_level_categories(db: Session = Depends(get_db)):
    return [category_service.to_response(db, c) for c in category_service.list_top_level(db)]


@category_router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return category_service.to_response(db, category_service.get(db, category_id))


@category_router.get("/{parent_id}/children", response_model=List[CategoryResponse])
def list_child_categories(parent_id: int, db: Session = Depends(get_db)):
    return [category_service.to_response(db, c) for c in category_service.list_children(db, parent_id)]


@category_router.post("", response_model=CategoryResponse, status_code=201)
def create_category(req: CategoryRequest, db: Session = Depends(get_db)):
    category = category_service.create(db, req)
    db.commit()
    return category_service.to_response(db, category)


@category_router.put("/{category_id}", response_model=CategoryResponse)
def update_category(category_id: int, req: CategoryRequest, db: Session = Depends(get_db)):
    category = category_service.update(db, category_id, req)
    db.commit()
    return category_service.to_response(db, category)


@category_router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    category_service.delete(db, category_id)
    db.commit()
    return Response(status_code=204)
