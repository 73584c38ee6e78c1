"""
Cart Module - Service Layer
==============================
Cart management: get/create, add (merge), update, remove, clear and the
cart view with totals computed on read.

Every operation takes the user id of the authenticated principal. Stock is
checked at mutation time only; nothing is reserved.

Concurrency: one cart per user (unique carts.user_id) and one line per
product per cart (unique cart_id+product_id). A losing insert rolls back
and the mutation is replayed once against the committed row.
"""

import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from common.exceptions import (
    UserNotFound, ProductNotFound, ProductInactive, InsufficientStock,
    CartItemNotFound, Forbidden,
)
from common.helpers import now_utc, to_money
from modules.cart.models import Cart, CartItem
from modules.cart.repository import CartRepository, CartItemRepository
from modules.cart.schemas import (
    AddToCartRequest, UpdateCartItemRequest, CartItemResponse, CartResponse,
)
from modules.catalog.repository import ProductRepository
from modules.user.repository import UserRepository

logger = logging.getLogger("fivepapa.cart")


class CartService:

    def get_or_create(self, db: Session, user_id: int) -> Cart:
        """Get existing cart or create an empty one for the user."""
        cart = CartRepository.find_by_user_id(db, user_id)
        if cart:
            return cart

        if not UserRepository.exists_by_id(db, user_id):
            raise UserNotFound(user_id)

        try:
            return CartRepository.save(db, Cart(user_id=user_id))
        except IntegrityError:
            db.rollback()
            # Race condition: another request created this cart
            logger.debug(f"Cart for user {user_id} created concurrently, re-reading")
            cart = CartRepository.find_by_user_id(db, user_id)
            if not cart:
                raise
            return cart

    def get_cart(self, db: Session, user_id: int) -> CartResponse:
        return self.to_response(db, self.get_or_create(db, user_id))

    def add_item(self, db: Session, user_id: int, req: AddToCartRequest) -> CartResponse:
        """
        Add a product; an existing line for the same product is merged.

        Raises:
            ProductNotFound, ProductInactive
            InsufficientStock when the (merged) quantity exceeds stock
        """
        try:
            self._add_item(db, user_id, req)
        except IntegrityError:
            db.rollback()
            logger.info(f"Concurrent add of product {req.product_id} for user {user_id}, retrying as merge")
            self._add_item(db, user_id, req)
        return self.get_cart(db, user_id)

    def _add_item(self, db: Session, user_id: int, req: AddToCartRequest):
        cart = self.get_or_create(db, user_id)

        product = ProductRepository.find_by_id(db, req.product_id)
        if not product:
            raise ProductNotFound(req.product_id)
        if not product.active:
            raise ProductInactive(req.product_id)
        if req.quantity > product.stock:
            raise InsufficientStock(product.stock)

        item = CartItemRepository.find_by_cart_id_and_product_id(db, cart.id, product.id)
        if item:
            new_qty = item.quantity + req.quantity
            if new_qty > product.stock:
                raise InsufficientStock(product.stock, in_cart=item.quantity)
            item.quantity = new_qty
            logger.info(f"Merged product {product.id} into cart {cart.id}: quantity {new_qty}")
        else:
            item = CartItem(cart_id=cart.id, product_id=product.id, quantity=req.quantity)

        CartItemRepository.save(db, item)
        self._touch(db, cart)

    def _owned_item(self, db: Session, user_id: int, item_id: int) -> CartItem:
        """Load a line item and verify it sits in the caller's cart."""
        item = CartItemRepository.find_by_id(db, item_id)
        if not item:
            raise CartItemNotFound(item_id)
        cart = CartRepository.find_by_user_id(db, user_id)
        if not cart or item.cart_id != cart.id:
            logger.info(f"User {user_id} tried to modify cart item {item_id} of another cart")
            raise Forbidden("You do not have permission to modify this cart item")
        return item

    def update_item(self, db: Session, user_id: int, item_id: int, req: UpdateCartItemRequest) -> CartResponse:
        """Set the quantity of a line item (absolute, not a delta)."""
        item = self._owned_item(db, user_id, item_id)
        if req.quantity > item.product.stock:
            raise InsufficientStock(item.product.stock)

        item.quantity = req.quantity
        CartItemRepository.save(db, item)
        self._touch(db, CartRepository.find_by_user_id(db, user_id))
        return self.get_cart(db, user_id)

    def remove_item(self, db: Session, user_id: int, item_id: int) -> CartResponse:
        item = self._owned_item(db, user_id, item_id)
        CartItemRepository.delete(db, item)
        self._touch(db, CartRepository.find_by_user_id(db, user_id))
        return self.get_cart(db, user_id)

    def clear(self, db: Session, user_id: int):
        """Remove every line item; the cart itself survives."""
        cart = self.get_or_create(db, user_id)
        removed = CartItemRepository.delete_by_cart_id(db, cart.id)
        self._touch(db, cart)
        logger.info(f"Cleared cart {cart.id} ({removed} item(s))")

    def _touch(self, db: Session, cart: Cart):
        cart.updated_at = now_utc()
        db.flush()

    def to_response(self, db: Session, cart: Cart) -> CartResponse:
        """Aggregates are computed here on every read, never stored."""
        items = []
        total_quantity = 0
        total_amount = to_money(0)

        for item in CartItemRepository.find_by_cart_id(db, cart.id):
            product = item.product
            price = to_money(product.price)
            subtotal = to_money(price * item.quantity)
            items.append(CartItemResponse(
                id=item.id,
                product_id=product.id,
                product_name=product.name,
                product_description=product.description,
                product_price=price,
                product_image_url=product.image_url,
                quantity=item.quantity,
                subtotal=subtotal,
                available_stock=product.stock,
                in_stock=product.active and product.stock >= item.quantity,
            ))
            total_quantity += item.quantity
            total_amount += subtotal

        return CartResponse(
            id=cart.id,
            user_id=cart.user_id,
            items=items,
            total_items=len(items),
            total_quantity=total_quantity,
            total_amount=to_money(total_amount),
            created_at=cart.created_at,
            updated_at=cart.updated_at,
        )


cart_service = CartService()
