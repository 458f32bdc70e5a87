# storefront/services/order_service.py
from datetime import datetime, timezone
from typing import Dict

from sqlalchemy.orm import Session

from storefront.data.database import unit_of_work
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import InsufficientStock, InvalidArgument, NotFound
from storefront.domain.order_status import OrderStatus, check_transition
from storefront.domain.schemas import DashboardMetrics, OrderOut, OrderPage
from storefront.repos.address_repo import AddressRepo
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.pricing import line_total, sum_totals, to_money
from storefront.utils.logging import get_logger
from storefront.utils.retry import conflict_retry
from storefront.utils.settings import MAX_PAGE_SIZE, ORDER_STATUS_POLICY

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    # naive traktujemy jako UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Separacja od CartService, koszyk czyszczony przez CartService
    w tej samej transakcji co zapis zamowienia.
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        lock_service: LockService | None = None,
        status_policy: str = ORDER_STATUS_POLICY,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.addresses = AddressRepo(db)
        self.cart_service = CartService(db)
        self.notification_service = notification_service or NotificationService()
        self.lock_service = lock_service
        self.status_policy = status_policy

    def place_order(self, user_id: int, shipping_address_id: int) -> OrderOut:
        """
        Use Case: Złożenie zamówienia z koszyka.

        1. Weryfikuje uzytkownika i adres dostawy
        2. Blokuje koszyk (SELECT ... FOR UPDATE), pusty koszyk -> blad
        3. Ponownie sprawdza stan kazdego produktu (aktualny, nie ze snapshotu)
        4. Tworzy pozycje zamowienia i warunkowo zmniejsza stan
        5-6. Zapisuje zamowienie
        7. Czysci koszyk
        Kroki 3-7 w jednej transakcji. Powiadomienie dopiero po commicie.
        """
        if self.lock_service is None:
            order = self._place_order(user_id, shipping_address_id)
        else:
            with self.lock_service.checkout_lock(user_id):
                order = self._place_order(user_id, shipping_address_id)

        try:
            self.notification_service.send_order_notification(user_id, order.id)
        except Exception as e:
            logger.warning(f"Failed to dispatch notification for order {order.id}: {e}")

        return order

    @conflict_retry()
    def _place_order(self, user_id: int, shipping_address_id: int) -> OrderOut:
        logger.info(f"Placing order for user {user_id}, shipping address {shipping_address_id}")

        with unit_of_work(self.db):
            if not self.users.exists(user_id):
                logger.error(f"User {user_id} not found during order placement")
                raise NotFound("user", user_id)

            if not self.addresses.exists(shipping_address_id):
                logger.error(f"Shipping address {shipping_address_id} not found during order placement")
                raise NotFound("address", shipping_address_id)

            cart = self.carts.lock_cart_by_user(user_id)
            if not cart or not cart.items:
                logger.warning(f"Order placement failed: cart is empty for user {user_id}")
                raise InvalidArgument("Cannot place order with an empty cart")

            # stala kolejnosc blokad produktow, zeby nie bylo deadlockow
            cart_items = sorted(cart.items, key=lambda i: i.product_id)

            for ci in cart_items:
                product = self.products.lock_product(ci.product_id)
                if not product:
                    raise NotFound("product", ci.product_id)
                if product.stock_quantity < ci.quantity:
                    logger.warning(
                        f"Insufficient stock for product {product.id}: "
                        f"requested {ci.quantity}, available {product.stock_quantity}. Order not placed"
                    )
                    raise InsufficientStock(product.id, ci.quantity, product.stock_quantity)

            order_items = []
            for ci in cart_items:
                order_items.append(
                    OrderItemModel(
                        product_id=ci.product_id,
                        quantity=ci.quantity,
                        price=ci.price_at_addition,
                        discount=ci.discount_at_addition,
                        total=line_total(ci.price_at_addition, ci.discount_at_addition, ci.quantity),
                    )
                )

                # warunkowy update, 0 wierszy = ktos wykupil stan w miedzyczasie
                if not self.products.decrement_stock(ci.product_id, ci.quantity):
                    available = self._current_stock(ci.product_id)
                    logger.warning(f"Stock decrement failed for product {ci.product_id}, available {available}")
                    raise InsufficientStock(ci.product_id, ci.quantity, available)

                logger.debug(f"Stock of product {ci.product_id} decremented by {ci.quantity}")

            order = OrderModel(
                user_id=user_id,
                shipping_address_id=shipping_address_id,
                status=OrderStatus.PENDING.value,
                order_date=datetime.now(timezone.utc),
                total_amount=sum_totals(i.total for i in order_items),
                items=order_items,
            )
            self.repo.create_order(order)

            self.cart_service.empty_cart(cart)

        logger.info(f"Order {order.id} placed for user {user_id}, total {order.total_amount}")
        return OrderOut.model_validate(order)

    def get_order(self, order_id: int) -> OrderOut:
        """
        Use Case: Pobranie zamówienia (Query).
        """
        order = self.repo.get_order(order_id)
        if not order:
            logger.warning(f"Order {order_id} not found")
            raise NotFound("order", order_id)
        return OrderOut.model_validate(order)

    def list_by_user(self, user_id: int, page: int = 0, size: int = 20) -> OrderPage:
        self._check_page(page, size)
        if not self.users.exists(user_id):
            raise NotFound("user", user_id)
        items, total = self.repo.list_by_user(user_id, page, size)
        logger.info(f"Retrieved {len(items)} of {total} orders for user {user_id}")
        return self._to_page(items, total, page, size)

    def list_all(self, page: int = 0, size: int = 20) -> OrderPage:
        self._check_page(page, size)
        items, total = self.repo.list_all(page, size)
        return self._to_page(items, total, page, size)

    def list_by_status(self, status: OrderStatus, page: int = 0, size: int = 20) -> OrderPage:
        self._check_page(page, size)
        items, total = self.repo.list_by_status(OrderStatus(status).value, page, size)
        return self._to_page(items, total, page, size)

    def list_between(self, start: datetime, end: datetime, page: int = 0, size: int = 20) -> OrderPage:
        self._check_page(page, size)
        start, end = _as_utc(start), _as_utc(end)
        if start > end:
            raise InvalidArgument("Start of the date range must not be after its end")
        items, total = self.repo.list_between(start, end, page, size)
        return self._to_page(items, total, page, size)

    @conflict_retry()
    def update_status(self, order_id: int, new_status: OrderStatus) -> OrderOut:
        try:
            new_status = OrderStatus(new_status)
        except ValueError:
            raise InvalidArgument(f"Unknown order status: {new_status}")

        with unit_of_work(self.db):
            order = self.repo.get_order(order_id)
            if not order:
                raise NotFound("order", order_id)

            check_transition(OrderStatus(order.status), new_status, self.status_policy)
            self.repo.update_order_status(order, new_status.value)

        logger.info(f"Order {order_id} status updated to {new_status.value}")
        return OrderOut.model_validate(order)

    def dashboard_metrics(self) -> DashboardMetrics:
        count, sales = self.repo.totals()
        return DashboardMetrics(total_orders=count, total_sales=to_money(sales))

    def counts_by_status(self) -> Dict[OrderStatus, int]:
        found = self.repo.counts_by_status()
        return {status: found.get(status.value, 0) for status in OrderStatus}

    # ---- helpers ----

    def _current_stock(self, product_id: int) -> int:
        product = self.products.get_product(product_id)
        return product.stock_quantity if product else 0

    @staticmethod
    def _check_page(page: int, size: int) -> None:
        if page < 0:
            raise InvalidArgument("Page index must not be negative")
        if size <= 0 or size > MAX_PAGE_SIZE:
            raise InvalidArgument(f"Page size must be between 1 and {MAX_PAGE_SIZE}")

    @staticmethod
    def _to_page(items, total: int, page: int, size: int) -> OrderPage:
        return OrderPage(
            items=[OrderOut.model_validate(o) for o in items],
            total=total,
            page=page,
            size=size,
        )
