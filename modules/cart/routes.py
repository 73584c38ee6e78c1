"""
Cart Routes
============
The caller's own cart only: the user id always comes from the principal.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from config.database import get_db
from modules.auth.deps import require_principal
from modules.auth.principal import UserPrincipal
from modules.cart.schemas import AddToCartRequest, UpdateCartItemRequest, CartResponse
from modules.cart.service import cart_service

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=CartResponse)
def get_cart(
    db: Session = Depends(get_db),
    me: UserPrincipal = Depends(require_principal),
):
    cart = cart_service.get_cart(db, me.user_id)
    db.commit()
    return cart


@router.post("/items", response_model=CartResponse)
def add_to_cart(
    req: AddToCartRequest,
    db: Session = Depends(get_db),
    me: UserPrincipal = Depends(require_principal),
):
    cart = cart_service.add_item(db, me.user_id, req)
    db.commit()
    return cart


@router.put("/items/{item_id}", response_model=CartResponse)
def update_cart_item(
    item_id: int,
    req: UpdateCartItemRequest,
    db: Session = Depends(get_db),
    me: UserPrincipal = Depends(require_principal),
):
    cart = cart_service.update_item(db, me.user_id, item_id, req)
    db.commit()
    return cart


@router.delete("/items/{item_id}", response_model=CartResponse)
def remove_cart_item(
    item_id: int,
    db: Session = Depends(get_db),
    me: UserPrincipal = Depends(require_principal),
):
    cart = cart_service.remove_item(db, me.user_id, item_id)
    db.commit()
    return cart


@router.delete("", status_code=204)
def clear_cart(
    db: Session = Depends(get_db),
    me: UserPrincipal = Depends(require_principal),
):
    cart_service.clear(db, me.user_id)
    db.commit()
    return Response(status_code=204)
