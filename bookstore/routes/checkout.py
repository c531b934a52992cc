"""Checkout API routes for the bookstore"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from pricing import InsufficientStock, OrderStatus

from ..core.config import settings
from ..models.checkout import (
    CheckoutRequest,
    CheckoutResponse,
    PaymentMethod,
    PaymentStatus,
)
from ..database.carts import cart_db
from ..database.coupons import coupon_db
from ..database.orders import order_db
from ..database.products import product_db
from ..database.transaction import transaction
from ..security.session import SessionUser, require_user
from ..services.orders import fail_payment, price_cart
from ..services.payment_gateway import PaymentGatewayError, RazorpayClient, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])


@router.post("", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutRequest,
    user: SessionUser = Depends(require_user),
    gateway: RazorpayClient = Depends(get_payment_gateway),
):
    """
    Turn the signed-in user's cart into an order.

    Pricing, coupon redemption, stock reservation and order creation run
    under one store transaction. Online payments then get a gateway order
    the storefront hands to the checkout widget.
    """
    now = datetime.now(timezone.utc)

    with transaction():
        cart = cart_db.get_cart(user.user_id)
        if not cart or not cart.items:
            raise HTTPException(status_code=400, detail="Cart is empty")

        breakdown = price_cart(
            cart,
            coupon_code=request.coupon_code,
            enforce_stock=True,
            now=now,
        )
        if breakdown.coupon_error is not None:
            raise breakdown.coupon_error

        physical_lines = [line for line in breakdown.lines if not line.is_ebook]
        if physical_lines and request.shipping_address is None:
            raise HTTPException(
                status_code=400,
                detail="Shipping address is required for printed books",
            )

        if breakdown.applied_coupon_code:
            coupon_db.redeem(breakdown.applied_coupon_code, breakdown.subtotal, now)

        for line in physical_lines:
            if not product_db.update_stock(line.product_id, -line.quantity):
                product = product_db.get_product(line.product_id)
                raise InsufficientStock(
                    line.product_id,
                    line.quantity,
                    product.stock if product else 0,
                    title=line.title,
                )

        order = order_db.create_order(
            user_id=user.user_id,
            breakdown=breakdown,
            payment_method=request.payment_method,
            currency=settings.currency,
            shipping_address=request.shipping_address,
        )
        cart_db.clear_cart(user.user_id)

    if request.payment_method == PaymentMethod.ONLINE:
        if order.total == 0:
            # Nothing to collect
            with transaction():
                order_db.update_payment(order.order_id, PaymentStatus.PAID)
                order_db.update_status(order.order_id, OrderStatus.PROCESSING)
        else:
            try:
                gateway_order = await gateway.create_order(
                    amount=order.total,
                    currency=order.currency,
                    receipt=order.order_id,
                )
            except PaymentGatewayError as e:
                logger.error(f"Payment initialization failed for order {order.order_id}: {e}")
                fail_payment(order)
                raise HTTPException(status_code=502, detail="Failed to create payment order")

            order_db.update_payment(
                order.order_id,
                PaymentStatus.PENDING,
                gateway_order_id=gateway_order["id"],
            )

    logger.info(
        f"Order {order.order_id} created for user {user.user_id}: "
        f"{order.total} {order.currency} via {order.payment_method.value}"
        + (f", coupon {order.coupon_code}" if order.coupon_code else "")
    )

    return CheckoutResponse(
        success=True,
        order=order,
        gateway_key_id=gateway.key_id if request.payment_method == PaymentMethod.ONLINE else None,
    )
