"""Order storage for the bookstore"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pricing import OrderStatus, PriceBreakdown, advance

from ..models.checkout import (
    Order,
    OrderItem,
    PaymentMethod,
    PaymentStatus,
    ShippingAddress,
)
from .transaction import transaction


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self):
        self.orders: dict[str, Order] = {}

    def reset(self) -> None:
        with transaction():
            self.orders = {}

    def create_order(
        self,
        user_id: str,
        breakdown: PriceBreakdown,
        payment_method: PaymentMethod,
        currency: str,
        shipping_address: Optional[ShippingAddress] = None,
    ) -> Order:
        """Create an order from a checkout-time price breakdown"""
        now = datetime.now(timezone.utc)

        order = Order(
            order_id=f"ORD-{uuid.uuid4().hex[:8].upper()}",
            user_id=user_id,
            status=OrderStatus.PENDING,
            items=[OrderItem.from_line(line) for line in breakdown.lines],
            subtotal=breakdown.subtotal,
            discount=breakdown.discount,
            shipping=breakdown.shipping,
            total=breakdown.total,
            currency=currency,
            coupon_code=breakdown.applied_coupon_code,
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING,
            shipping_address=shipping_address,
            created_at=now,
            updated_at=now,
        )

        with transaction():
            self.orders[order.order_id] = order
        return order

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        """
        Move an order through its lifecycle.

        Raises:
            InvalidStatusTransition: if the move is not allowed
        """
        with transaction():
            order = self.get_order(order_id)
            if not order:
                return None

            order.status = advance(order.status, status)
            order.updated_at = datetime.now(timezone.utc)
            return order

    def update_payment(
        self,
        order_id: str,
        payment_status: PaymentStatus,
        gateway_order_id: Optional[str] = None,
        gateway_payment_id: Optional[str] = None,
    ) -> Optional[Order]:
        """Record payment progress reported by the gateway"""
        with transaction():
            order = self.get_order(order_id)
            if not order:
                return None

            order.payment_status = payment_status
            if gateway_order_id:
                order.gateway_order_id = gateway_order_id
            if gateway_payment_id:
                order.gateway_payment_id = gateway_payment_id
            order.updated_at = datetime.now(timezone.utc)
            return order

    def list_orders(self, limit: int = 50, user_id: Optional[str] = None) -> list[Order]:
        """List recent orders, optionally for one customer"""
        orders = list(self.orders.values())
        if user_id is not None:
            orders = [o for o in orders if o.user_id == user_id]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:limit]


# Singleton instance
order_db = OrderDatabase()
