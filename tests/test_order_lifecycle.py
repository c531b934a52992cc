"""Tests for order status transitions"""

import pytest

from pricing import (
    InvalidStatusTransition,
    OrderStatus,
    advance,
    can_transition,
    is_cancellable,
    is_terminal,
)


@pytest.mark.parametrize(
    "current,target",
    [
        (OrderStatus.PENDING, OrderStatus.PROCESSING),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
        (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
    ],
)
def test_allowed_transitions(current, target):
    assert can_transition(current, target)
    assert advance(current, target) == target


@pytest.mark.parametrize(
    "current,target",
    [
        (OrderStatus.PENDING, OrderStatus.SHIPPED),
        (OrderStatus.PENDING, OrderStatus.DELIVERED),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        (OrderStatus.SHIPPED, OrderStatus.PROCESSING),
        (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
        (OrderStatus.CANCELLED, OrderStatus.PENDING),
        (OrderStatus.PROCESSING, OrderStatus.PROCESSING),
    ],
)
def test_rejected_transitions(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidStatusTransition) as exc:
        advance(current, target)
    assert exc.value.kind == "InvalidStatusTransition"


def test_terminal_states():
    assert is_terminal(OrderStatus.DELIVERED)
    assert is_terminal(OrderStatus.CANCELLED)
    assert not is_terminal(OrderStatus.SHIPPED)


def test_only_unshipped_orders_are_cancellable():
    assert is_cancellable(OrderStatus.PENDING)
    assert is_cancellable(OrderStatus.PROCESSING)
    assert not is_cancellable(OrderStatus.SHIPPED)
    assert not is_cancellable(OrderStatus.DELIVERED)
    assert not is_cancellable(OrderStatus.CANCELLED)
