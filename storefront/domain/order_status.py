# storefront/domain/order_status.py
from enum import Enum

from storefront.domain.errors import InvalidArgument


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# dozwolone przejscia w trybie strict
_FORWARD = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

PERMISSIVE = "permissive"
STRICT = "strict"


def check_transition(current: OrderStatus, new: OrderStatus, policy: str = PERMISSIVE) -> None:
    """
    W trybie permissive kazda zmiana statusu jest akceptowana.
    W trybie strict tylko krok do przodu albo anulowanie z niekoncowego stanu,
    ustawienie tego samego statusu jest no-op.
    """
    if policy == PERMISSIVE or current == new:
        return

    if policy != STRICT:
        raise InvalidArgument(f"Unknown order status policy: {policy}")

    if new not in _FORWARD[current]:
        raise InvalidArgument(
            f"Order status cannot change from {current.value} to {new.value}"
        )
