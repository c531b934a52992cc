"""Order status lifecycle"""

from enum import Enum

from .errors import InvalidStatusTransition


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return OrderStatus(target) in TRANSITIONS[OrderStatus(current)]


def advance(current: OrderStatus, target: OrderStatus) -> OrderStatus:
    """
    Move an order from ``current`` to ``target``.

    Raises:
        InvalidStatusTransition: if the lifecycle does not allow the move
    """
    current = OrderStatus(current)
    target = OrderStatus(target)
    if target not in TRANSITIONS[current]:
        raise InvalidStatusTransition(current.value, target.value)
    return target


def is_terminal(status: OrderStatus) -> bool:
    return not TRANSITIONS[OrderStatus(status)]


def is_cancellable(status: OrderStatus) -> bool:
    """Orders can be cancelled any time before they ship"""
    return can_transition(status, OrderStatus.CANCELLED)
