#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CartItemOut,
    CartOut,
    ItemIn,
    ItemQuantityIn,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db=db)


@router.get("/{user_id}", response_model=CartOut)
def get_cart(user_id: int, svc: CartService = Depends(get_service)):
    try:
        cart = svc.get_cart(user_id)
    except StorefrontError as e:
        raise to_http(e)
    if not cart:
        raise HTTPException(status_code=404, detail={"code": "not_found", "message": "Cart not created yet"})
    return cart


@router.put("/{user_id}", response_model=CartOut)
def get_or_create_cart(user_id: int, svc: CartService = Depends(get_service)):
    try:
        return svc.get_or_create_cart(user_id)
    except StorefrontError as e:
        raise to_http(e)


@router.post("/{user_id}/items", response_model=CartOut)
def add_item(user_id: int, payload: ItemIn, svc: CartService = Depends(get_service)):
    try:
        return svc.add_item(
            user_id=user_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
        )
    except StorefrontError as e:
        raise to_http(e)


@router.put("/{user_id}/items/{product_id}", response_model=CartItemOut)
def set_item_quantity(
    user_id: int,
    product_id: int,
    payload: ItemQuantityIn,
    svc: CartService = Depends(get_service),
):
    try:
        item = svc.set_item_quantity(user_id, product_id, payload.quantity)
    except StorefrontError as e:
        raise to_http(e)
    if item is None:
        # pozycja usunieta
        return Response(status_code=204)
    return item


@router.delete("/{user_id}/items/{product_id}", status_code=204)
def remove_item(user_id: int, product_id: int, svc: CartService = Depends(get_service)):
    try:
        removed = svc.remove_item(user_id, product_id)
    except StorefrontError as e:
        raise to_http(e)
    # serwis traktuje brak pozycji jako sukces (False), http zostaje przy 404 jak wczesniej
    if not removed:
        raise HTTPException(status_code=404, detail={"code": "not_found", "message": "Product not in cart"})
    return Response(status_code=204)


@router.delete("/{user_id}/items", status_code=204)
def clear_cart(user_id: int, svc: CartService = Depends(get_service)):
    try:
        svc.clear(user_id)
    except StorefrontError as e:
        raise to_http(e)
    return Response(status_code=204)
