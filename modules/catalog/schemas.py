"""
Catalog Module - Schemas
=========================
Category and Product request/response contracts.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from common.schemas import CamelModel, not_blank


# ==========================================
# 🗂️ Category
# ==========================================

class CategoryRequest(CamelModel):
    name: str = Field(..., max_length=100)
    description: Optional[str] = None
    parent_id: Optional[int] = None  # None -> top-level category
    active: Optional[bool] = True

    @field_validator("name")
    @classmethod
    def check_not_blank(cls, value):
        return not_blank(value)


class CategorySimpleResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    active: bool
    product_count: int = 0


class CategoryResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    parent_name: Optional[str] = None
    children: List[CategorySimpleResponse] = []
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_top_level: bool
    product_count: int = 0


# ==========================================
# 📦 Product
# ==========================================

class ProductRequest(CamelModel):
    name: str = Field(..., max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(..., ge=0)
    image_url: Optional[str] = Field(None, max_length=500)
    category_id: Optional[int] = None
    active: bool = True
    featured: bool = False

    @field_validator("name")
    @classmethod
    def check_not_blank(cls, value):
        return not_blank(value)


class ProductResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    stock: int
    image_url: Optional[str] = None
    active: bool
    featured: bool
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
