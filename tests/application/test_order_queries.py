from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.domain.errors import InvalidArgument, NotFound
from storefront.domain.order_status import STRICT, OrderStatus
from storefront.services.order_service import OrderService


@pytest.fixture()
def place(cart_service, order_service, store, address_id):
    """Sklada zamowienie z jednym produktem dla danego uzytkownika."""

    def _place(user_id, price="10.00", quantity=1):
        pid = store.product(price=price, stock=quantity)
        cart_service.add_item(user_id, pid, quantity)
        return order_service.place_order(user_id, address_id)

    return _place


class TestGetOrder:
    def test_found(self, order_service, place, user_id):
        placed = place(user_id)
        fetched = order_service.get_order(placed.id)
        assert fetched.id == placed.id
        assert fetched.total_amount == placed.total_amount
        assert len(fetched.items) == 1

    def test_missing(self, order_service):
        with pytest.raises(NotFound):
            order_service.get_order(321)


class TestListing:
    def test_list_by_user_paginates_newest_first(self, order_service, place, user_id):
        ids = [place(user_id).id for _ in range(3)]

        first = order_service.list_by_user(user_id, page=0, size=2)
        second = order_service.list_by_user(user_id, page=1, size=2)

        assert first.total == 3
        assert [o.id for o in first.items] == [ids[2], ids[1]]
        assert [o.id for o in second.items] == [ids[0]]
        assert (second.page, second.size) == (1, 2)

    def test_list_by_user_only_returns_own_orders(self, order_service, place, store, user_id):
        other = store.user(2, "Bob")
        place(user_id)
        place(other)

        page = order_service.list_by_user(other)
        assert page.total == 1
        assert page.items[0].user_id == other

    def test_list_by_unknown_user(self, order_service):
        with pytest.raises(NotFound):
            order_service.list_by_user(77)

    def test_list_all(self, order_service, place, store, user_id):
        other = store.user(2, "Bob")
        place(user_id)
        place(other)
        assert order_service.list_all(0, 10).total == 2

    @pytest.mark.parametrize("page,size", [(-1, 10), (0, 0), (0, 1000)])
    def test_bad_paging(self, order_service, page, size):
        with pytest.raises(InvalidArgument):
            order_service.list_all(page, size)

    def test_list_by_status(self, order_service, place, user_id):
        a = place(user_id)
        place(user_id)
        order_service.update_status(a.id, OrderStatus.SHIPPED)

        shipped = order_service.list_by_status(OrderStatus.SHIPPED)
        pending = order_service.list_by_status(OrderStatus.PENDING)

        assert [o.id for o in shipped.items] == [a.id]
        assert pending.total == 1

    def test_list_between(self, order_service, place, user_id):
        placed = place(user_id)
        now = datetime.now(timezone.utc)

        inside = order_service.list_between(now - timedelta(hours=1), now + timedelta(hours=1))
        outside = order_service.list_between(now + timedelta(hours=1), now + timedelta(hours=2))

        assert [o.id for o in inside.items] == [placed.id]
        assert outside.total == 0

    def test_list_between_rejects_reversed_range(self, order_service):
        now = datetime.now(timezone.utc)
        with pytest.raises(InvalidArgument):
            order_service.list_between(now, now - timedelta(days=1))


class TestUpdateStatus:
    def test_updates_status_only(self, order_service, place, user_id):
        placed = place(user_id, price="3.00", quantity=2)

        updated = order_service.update_status(placed.id, OrderStatus.PROCESSING)

        assert updated.status == OrderStatus.PROCESSING
        assert updated.total_amount == placed.total_amount
        assert [(i.price, i.quantity, i.total) for i in updated.items] == [
            (i.price, i.quantity, i.total) for i in placed.items
        ]

    def test_permissive_allows_out_of_order(self, order_service, place, user_id):
        placed = place(user_id)
        order_service.update_status(placed.id, OrderStatus.DELIVERED)
        assert order_service.update_status(placed.id, OrderStatus.PROCESSING).status == OrderStatus.PROCESSING

    def test_strict_rejects_leaving_terminal_state(self, db, notifier, place, user_id):
        placed = place(user_id)
        strict = OrderService(db, notification_service=notifier, status_policy=STRICT)
        strict.update_status(placed.id, OrderStatus.CANCELLED)

        with pytest.raises(InvalidArgument):
            strict.update_status(placed.id, OrderStatus.PROCESSING)

        assert strict.get_order(placed.id).status == OrderStatus.CANCELLED

    def test_accepts_plain_string(self, order_service, place, user_id):
        placed = place(user_id)
        assert order_service.update_status(placed.id, "SHIPPED").status == OrderStatus.SHIPPED

    def test_unknown_status(self, order_service, place, user_id):
        placed = place(user_id)
        with pytest.raises(InvalidArgument):
            order_service.update_status(placed.id, "LOST")

    def test_missing_order(self, order_service):
        with pytest.raises(NotFound):
            order_service.update_status(5, OrderStatus.SHIPPED)


class TestMetrics:
    def test_empty_store(self, order_service):
        metrics = order_service.dashboard_metrics()
        assert metrics.total_orders == 0
        assert metrics.total_sales == Decimal("0.00")
        assert set(order_service.counts_by_status().values()) == {0}

    def test_dashboard_metrics(self, order_service, place, user_id):
        place(user_id, price="10.00", quantity=2)
        place(user_id, price="4.50", quantity=1)

        metrics = order_service.dashboard_metrics()

        assert metrics.total_orders == 2
        assert metrics.total_sales == Decimal("24.50")

    def test_counts_by_status_covers_every_status(self, order_service, place, user_id):
        a = place(user_id)
        place(user_id)
        place(user_id)
        order_service.update_status(a.id, OrderStatus.CANCELLED)

        counts = order_service.counts_by_status()

        assert set(counts) == set(OrderStatus)
        assert counts[OrderStatus.PENDING] == 2
        assert counts[OrderStatus.CANCELLED] == 1
        assert counts[OrderStatus.DELIVERED] == 0
