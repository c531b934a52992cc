"""Customer order API routes for the bookstore"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from pricing import OrderStatus

from ..models.checkout import (
    LibraryEntry,
    Order,
    PaymentStatus,
    PaymentVerificationRequest,
    PaymentVerificationResponse,
)
from ..database.orders import order_db
from ..database.transaction import transaction
from ..security.session import SessionUser, require_user
from ..services.orders import cancel_order, fail_payment
from ..services.payment_gateway import PaymentGatewayError, RazorpayClient, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders"])


def _get_owned_order(order_id: str, user: SessionUser) -> Order:
    order = order_db.get_order(order_id)
    # Other users' orders look missing
    if not order or order.user_id != user.user_id:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.get("", response_model=list[Order])
async def list_orders(
    limit: int = Query(50, ge=1, le=200),
    user: SessionUser = Depends(require_user),
):
    """List the signed-in user's orders, newest first"""
    return order_db.list_orders(limit=limit, user_id=user.user_id)


@router.get("/library", response_model=list[LibraryEntry])
async def library(user: SessionUser = Depends(require_user)):
    """E-books the signed-in user has paid for"""
    entries: dict[str, LibraryEntry] = {}
    for order in order_db.list_orders(limit=len(order_db.orders), user_id=user.user_id):
        if order.payment_status != PaymentStatus.PAID or order.status == OrderStatus.CANCELLED:
            continue
        for item in order.items:
            if item.is_ebook:
                # Orders are newest first; keep the earliest purchase
                entries[item.product_id] = LibraryEntry(
                    product_id=item.product_id,
                    title=item.title,
                    order_id=order.order_id,
                    purchased_at=order.created_at,
                )
    return sorted(entries.values(), key=lambda e: e.purchased_at, reverse=True)


@router.get("/{order_id}", response_model=Order)
async def get_order(order_id: str, user: SessionUser = Depends(require_user)):
    """Get order details"""
    return _get_owned_order(order_id, user)


@router.post("/{order_id}/verify-payment", response_model=PaymentVerificationResponse)
async def verify_payment(
    order_id: str,
    request: PaymentVerificationRequest,
    user: SessionUser = Depends(require_user),
    gateway: RazorpayClient = Depends(get_payment_gateway),
):
    """
    Confirm an online payment with the signature returned by the gateway.

    A valid signature marks the order paid and moves it to PROCESSING.
    An invalid one cancels the order and releases its stock.
    """
    order = _get_owned_order(order_id, user)

    if not order.gateway_order_id:
        raise HTTPException(status_code=400, detail="Gateway order ID not found")

    if order.payment_status == PaymentStatus.PAID:
        return PaymentVerificationResponse(success=True, message="Payment already verified", order=order)

    if order.status == OrderStatus.CANCELLED:
        raise HTTPException(status_code=409, detail="Order is cancelled")

    if not gateway.verify_signature(order.gateway_order_id, request.payment_id, request.signature):
        logger.warning(f"Payment signature verification failed for order {order.order_id}")
        fail_payment(order)
        return PaymentVerificationResponse(
            success=False,
            message="Payment verification failed",
            order=order,
        )

    with transaction():
        order_db.update_payment(
            order.order_id,
            PaymentStatus.PAID,
            gateway_payment_id=request.payment_id,
        )
        order_db.update_status(order.order_id, OrderStatus.PROCESSING)

    logger.info(f"Payment {request.payment_id} verified for order {order.order_id}")
    return PaymentVerificationResponse(success=True, message="Payment verified", order=order)


@router.post("/{order_id}/cancel", response_model=Order)
async def cancel(
    order_id: str,
    user: SessionUser = Depends(require_user),
    gateway: RazorpayClient = Depends(get_payment_gateway),
):
    """Cancel an order that has not shipped yet"""
    order = _get_owned_order(order_id, user)
    try:
        return await cancel_order(order, gateway)
    except PaymentGatewayError as e:
        logger.error(f"Refund failed for order {order.order_id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to process refund")
