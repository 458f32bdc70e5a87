from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.database import unit_of_work
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import Conflict, InsufficientStock, InvalidArgument, NotFound
from storefront.domain.schemas import CartItemOut, CartOut
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.pricing import ZERO, line_total, sum_totals
from storefront.utils.logging import get_logger
from storefront.utils.retry import conflict_retry

logger = get_logger(__name__)


class CartService:
    """
    Prosta implementacja cqrs dla domeny cart
    commands (get_or_create, add, set quantity, remove, clear) modyfikuja stan
    query (get) tylko odczyt

    Kazda komenda to jedna transakcja, koszyk chroniony optimistic lockingiem
    na polu version. Konflikt wersji -> Conflict -> ponowienie calej komendy.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> CartOut | None:
        self._ensure_user(user_id)
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return None
        return CartOut.model_validate(cart)

    #commands
    @conflict_retry()
    def get_or_create_cart(self, user_id: int) -> CartOut:
        with unit_of_work(self.db):
            cart = self._load_cart(user_id)
        return CartOut.model_validate(cart)

    @conflict_retry()
    def add_item(self, user_id: int, product_id: int, quantity: int) -> CartOut:
        # Walidacje
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidArgument("Quantity must be positive")

        with unit_of_work(self.db):
            cart = self._load_cart(user_id)
            product = self._get_product(product_id)

            if product.stock_quantity < quantity:
                logger.warning(
                    f"Insufficient stock for product {product_id}: "
                    f"requested {quantity}, available {product.stock_quantity}"
                )
                raise InsufficientStock(product_id, quantity, product.stock_quantity)

            existing_item = self.repo.get_cart_item(cart, product_id)

            if existing_item:
                new_quantity = existing_item.quantity + quantity
                if product.stock_quantity < new_quantity:
                    logger.warning(
                        f"Adding {quantity} of product {product_id} would exceed stock, "
                        f"in cart {existing_item.quantity}, available {product.stock_quantity}"
                    )
                    raise InsufficientStock(product_id, new_quantity, product.stock_quantity)

                logger.info(
                    f"Produkt {product_id} już jest w koszyku {cart.id}, zwiekszam ilosc "
                    f"z {existing_item.quantity} do {new_quantity}"
                )
                self._apply_snapshot(existing_item, product, new_quantity)
            else:
                logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart.id}")
                item = CartItemModel(product_id=product_id)
                self._apply_snapshot(item, product, quantity)
                self.repo.add_cart_item(cart, item)

            self._bump(cart)

        return CartOut.model_validate(cart)

    @conflict_retry()
    def set_item_quantity(self, user_id: int, product_id: int, new_quantity: int) -> CartItemOut | None:
        """
        Ilosc <= 0 usuwa pozycje i zwraca None (nie blad, nawet gdy pozycji nie bylo).
        Inaczej pelna nowa ilosc jest walidowana wzgledem stanu i snapshot ceny odswiezany.
        """
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int):
            raise InvalidArgument("Quantity must be an integer")

        with unit_of_work(self.db):
            cart = self._load_cart(user_id)
            item = self.repo.get_cart_item(cart, product_id)

            if new_quantity <= 0:
                if item:
                    self.repo.delete_cart_item(cart, item)
                    self._bump(cart)
                    logger.info(f"Produkt {product_id} usunięty z koszyka {cart.id} (ilosc {new_quantity})")
                return None

            if not item:
                raise NotFound("cart item", product_id, f"Product {product_id} is not in the cart")

            product = self._get_product(product_id)
            if product.stock_quantity < new_quantity:
                logger.warning(
                    f"Insufficient stock for product {product_id}: "
                    f"requested {new_quantity}, available {product.stock_quantity}"
                )
                raise InsufficientStock(product_id, new_quantity, product.stock_quantity)

            self._apply_snapshot(item, product, new_quantity)
            self._bump(cart)
            logger.info(f"Ilosc produktu {product_id} w koszyku {cart.id} ustawiona na {new_quantity}")

        return CartItemOut.model_validate(item)

    @conflict_retry()
    def remove_item(self, user_id: int, product_id: int) -> bool:
        with unit_of_work(self.db):
            cart = self._load_cart(user_id)
            item = self.repo.get_cart_item(cart, product_id)

            if not item:
                logger.info(f"Produktu {product_id} nie ma w koszyku {cart.id}, nic do usuniecia")
                return False

            self.repo.delete_cart_item(cart, item)
            self._bump(cart)
            logger.info(f"Produkt {product_id} usunięty z koszyka {cart.id}")

        return True

    @conflict_retry()
    def clear(self, user_id: int) -> None:
        with unit_of_work(self.db):
            cart = self._load_cart(user_id)
            self.empty_cart(cart)

    def empty_cart(self, cart: CartModel) -> None:
        """
        Czysci koszyk w biezacej transakcji, bez commita.
        Uzywane tez przez skladanie zamowienia.
        """
        if not cart.items:
            logger.info(f"Koszyk {cart.id} jest już pusty")
            return

        removed = self.repo.delete_all_items(cart)
        self._bump(cart)
        logger.info(f"Koszyk {cart.id} wyczyszczony, usunieto {removed} pozycji")

    # ---- helpers ----

    def _ensure_user(self, user_id: int) -> None:
        if not self.users.exists(user_id):
            logger.error(f"User {user_id} not found")
            raise NotFound("user", user_id)

    def _load_cart(self, user_id: int) -> CartModel:
        self._ensure_user(user_id)
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        cart = self.repo.create_cart(
            CartModel(
                user_id=user_id,
                total_amount=ZERO,
                version=1,
                updated_at=datetime.now(timezone.utc),
            )
        )
        logger.info(f"Utworzono nowy koszyk {cart.id} dla użytkownika {user_id}")
        return cart

    def _get_product(self, product_id: int) -> ProductModel:
        product = self.products.get_product(product_id)
        if not product:
            logger.error(f"Product {product_id} not found")
            raise NotFound("product", product_id)
        return product

    @staticmethod
    def _apply_snapshot(item: CartItemModel, product: ProductModel, quantity: int) -> None:
        discount = product.discount if product.discount is not None else Decimal(0)
        item.total = line_total(product.price, discount, quantity)
        item.quantity = quantity
        item.price_at_addition = product.price
        item.discount_at_addition = discount

    def _bump(self, cart: CartModel) -> None:
        """
        Przelicza total i podbija wersje.
        UPDATE carts SET version = v + 1 ... WHERE id = :id AND version = v
        """
        total = sum_totals(i.total for i in cart.items)
        old_version = cart.version
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=old_version,
            new_data={
                "version": old_version + 1,
                "total_amount": total,
                "updated_at": datetime.now(timezone.utc),
            },
        )

        # jesli 0 rows affected to ktos zmienil koszyk w miedzyczasie
        if rowcount == 0:
            logger.error(f"Konflikt wspolbieznosci na koszyku {cart.id} (wersja {old_version})")
            raise Conflict(f"Cart {cart.id} was modified concurrently")
