"""
Cart Module - Repositories
============================
Data access for Cart (one per user) and CartItem (one per cart+product).
"""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from modules.cart.models import Cart, CartItem


class CartRepository:

    @staticmethod
    def find_by_user_id(db: Session, user_id: int) -> Optional[Cart]:
        return db.query(Cart).filter(Cart.user_id == user_id).first()

    @staticmethod
    def exists_by_user_id(db: Session, user_id: int) -> bool:
        return db.query(Cart.id).filter(Cart.user_id == user_id).first() is not None

    @staticmethod
    def save(db: Session, cart: Cart) -> Cart:
        db.add(cart)
        db.flush()
        return cart

    @staticmethod
    def delete_by_user_id(db: Session, user_id: int):
        cart = CartRepository.find_by_user_id(db, user_id)
        if cart:
            db.delete(cart)
            db.flush()


class CartItemRepository:

    @staticmethod
    def find_by_id(db: Session, item_id: int) -> Optional[CartItem]:
        return db.get(CartItem, item_id)

    @staticmethod
    def find_by_cart_id_and_product_id(db: Session, cart_id: int, product_id: int) -> Optional[CartItem]:
        return db.query(CartItem).filter(
            CartItem.cart_id == cart_id,
            CartItem.product_id == product_id,
        ).first()

    @staticmethod
    def find_by_cart_id(db: Session, cart_id: int) -> List[CartItem]:
        return db.query(CartItem).options(joinedload(CartItem.product)).filter(
            CartItem.cart_id == cart_id,
        ).order_by(CartItem.id.asc()).all()

    @staticmethod
    def save(db: Session, item: CartItem) -> CartItem:
        db.add(item)
        db.flush()
        return item

    @staticmethod
    def delete(db: Session, item: CartItem):
        db.delete(item)
        db.flush()

    @staticmethod
    def delete_by_cart_id(db: Session, cart_id: int) -> int:
        deleted = db.query(CartItem).filter(CartItem.cart_id == cart_id).delete(synchronize_session="fetch")
        db.flush()
        return deleted

    @staticmethod
    def delete_by_product_id(db: Session, product_id: int) -> int:
        deleted = db.query(CartItem).filter(CartItem.product_id == product_id).delete(synchronize_session="fetch")
        db.flush()
        return deleted
