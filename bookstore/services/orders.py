"""Cart pricing and order cancellation shared by the routes"""

import logging
from datetime import datetime
from typing import Optional

from pricing import (
    InvalidStatusTransition,
    OrderStatus,
    PriceBreakdown,
    is_cancellable,
    quote,
)

from ..core.config import settings
from ..database.coupons import coupon_db
from ..database.orders import order_db
from ..database.products import product_db
from ..database.transaction import transaction
from ..models.cart import Cart
from ..models.checkout import Order, PaymentStatus
from .payment_gateway import RazorpayClient

logger = logging.getLogger(__name__)

# Orders with a cancellation in flight
_cancelling: set[str] = set()


def price_cart(
    cart: Cart,
    coupon_code: Optional[str] = None,
    enforce_stock: bool = False,
    now: Optional[datetime] = None,
) -> PriceBreakdown:
    """
    Price a cart against current catalog prices.

    Args:
        cart: Cart to price
        coupon_code: Code typed by the customer, if any
        enforce_stock: Check physical stock (checkout only)
        now: Time the coupon is applied; defaults to the current time
    """
    items = cart.line_items()
    products = product_db.prices_for(item.product_id for item in items)

    coupon = coupon_db.get_by_code(coupon_code) if coupon_code else None
    return quote(
        items,
        products,
        coupon=coupon.to_rules() if coupon else None,
        coupon_code=coupon_code,
        now=now,
        enforce_stock=enforce_stock,
        shipping=settings.shipping_fee,
    )


def restore_stock(order: Order) -> None:
    """Put printed copies of an order back on the shelf"""
    with transaction():
        for item in order.physical_items:
            if not product_db.update_stock(item.product_id, item.quantity):
                logger.warning(
                    f"Could not restore {item.quantity} copies of {item.product_id} "
                    f"for order {order.order_id}: book no longer in catalog"
                )


def _release_coupon(order: Order) -> None:
    if order.coupon_code and coupon_db.release(order.coupon_code):
        logger.info(f"Released one use of coupon {order.coupon_code} from order {order.order_id}")


def fail_payment(order: Order) -> Order:
    """Mark an order's payment as failed, cancelling it and releasing stock"""
    with transaction():
        if is_cancellable(order.status):
            order_db.update_status(order.order_id, OrderStatus.CANCELLED)
            restore_stock(order)
            _release_coupon(order)
        order_db.update_payment(order.order_id, PaymentStatus.FAILED)
    return order


async def cancel_order(order: Order, gateway: RazorpayClient) -> Order:
    """
    Cancel an order before it ships.

    Paid orders are refunded through the gateway first; a failed refund
    leaves the order untouched. The order is claimed under the store lock
    before the refund, so a second cancel arriving meanwhile is rejected
    instead of refunding twice.

    Raises:
        InvalidStatusTransition: if the order has shipped, is already closed
            or is being cancelled by another request
        PaymentGatewayError: if the refund fails
    """
    with transaction():
        if not is_cancellable(order.status) or order.order_id in _cancelling:
            raise InvalidStatusTransition(order.status.value, OrderStatus.CANCELLED.value)
        _cancelling.add(order.order_id)

    try:
        refunded = False
        if order.payment_status == PaymentStatus.PAID and order.gateway_payment_id:
            await gateway.refund(order.gateway_payment_id, order.total)
            refunded = True
            logger.info(f"Refunded {order.total} {order.currency} for order {order.order_id}")

        with transaction():
            order_db.update_status(order.order_id, OrderStatus.CANCELLED)
            restore_stock(order)
            _release_coupon(order)
            if refunded:
                order_db.update_payment(order.order_id, PaymentStatus.REFUNDED)
    finally:
        with transaction():
            _cancelling.discard(order.order_id)

    logger.info(f"Order {order.order_id} cancelled")
    return order
