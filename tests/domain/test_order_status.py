import pytest

from storefront.domain.errors import InvalidArgument
from storefront.domain.order_status import (
    PERMISSIVE,
    STRICT,
    TERMINAL_STATUSES,
    OrderStatus,
    check_transition,
)


class TestPermissivePolicy:
    def test_any_transition_is_accepted(self):
        check_transition(OrderStatus.DELIVERED, OrderStatus.PROCESSING, PERMISSIVE)
        check_transition(OrderStatus.CANCELLED, OrderStatus.PENDING, PERMISSIVE)


class TestStrictPolicy:
    @pytest.mark.parametrize(
        "current,new",
        [
            (OrderStatus.PENDING, OrderStatus.PROCESSING),
            (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
            (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        ],
    )
    def test_forward_and_cancel_allowed(self, current, new):
        check_transition(current, new, STRICT)

    @pytest.mark.parametrize(
        "current,new",
        [
            (OrderStatus.DELIVERED, OrderStatus.PROCESSING),
            (OrderStatus.CANCELLED, OrderStatus.PENDING),
            (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
            (OrderStatus.PENDING, OrderStatus.SHIPPED),
            (OrderStatus.SHIPPED, OrderStatus.PROCESSING),
        ],
    )
    def test_backward_skip_and_terminal_rejected(self, current, new):
        with pytest.raises(InvalidArgument):
            check_transition(current, new, STRICT)

    def test_same_status_is_noop(self):
        check_transition(OrderStatus.DELIVERED, OrderStatus.DELIVERED, STRICT)

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def test_unknown_policy_is_rejected():
    with pytest.raises(InvalidArgument):
        check_transition(OrderStatus.PENDING, OrderStatus.SHIPPED, "lenient")
