"""
Cart Module - Schemas
======================
Cart mutation payloads and the cart view with its computed aggregates.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from common.schemas import CamelModel


class AddToCartRequest(CamelModel):
    product_id: int
    quantity: int = Field(..., ge=1)


class UpdateCartItemRequest(CamelModel):
    quantity: int = Field(..., ge=1)


class CartItemResponse(CamelModel):
    id: int
    product_id: int
    product_name: str
    product_description: Optional[str] = None
    product_price: Decimal
    product_image_url: Optional[str] = None
    quantity: int
    subtotal: Decimal
    available_stock: int
    in_stock: bool


class CartResponse(CamelModel):
    id: int
    user_id: int
    items: List[CartItemResponse] = []
    total_items: int = 0
    total_quantity: int = 0
    total_amount: Decimal = Decimal("0.00")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
