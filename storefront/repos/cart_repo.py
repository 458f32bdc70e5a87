# storefront/repos/cart_repo.py
from typing import Any, Dict

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def lock_cart_by_user(self, user_id: int) -> CartModel | None:
        # SELECT ... FOR UPDATE, trzymany do konca transakcji
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_item(self, cart: CartModel, product_id: int) -> CartItemModel | None:
        for item in cart.items:
            if item.product_id == product_id:
                return item
        return None

    def add_cart_item(self, cart: CartModel, item: CartItemModel) -> CartItemModel:
        cart.items.append(item)
        return item

    def delete_cart_item(self, cart: CartModel, item: CartItemModel) -> None:
        # delete-orphan usuwa wiersz przy flushu
        cart.items.remove(item)

    def delete_all_items(self, cart: CartModel) -> int:
        count = len(cart.items)
        cart.items.clear()
        return count

    def update_cart_version(self, cart_id: int, old_version: int, new_data: Dict[str, Any]) -> int:
        """
        Optimistic locking: UPDATE carts SET ... WHERE id = :id AND version = :old.
        Zwraca rowcount, 0 oznacza ze ktos zmienil koszyk w miedzyczasie.
        """
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
