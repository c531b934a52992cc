"""Back office API routes for the bookstore"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from pricing import OrderStatus, to_money

from ..models.analytics import AnalyticsSummary, ProductRevenue
from ..models.checkout import Order, PaymentMethod, PaymentStatus, UpdateOrderStatusRequest
from ..models.coupon import Coupon, CouponInput
from ..models.customer import Customer, CustomerSummary, Role, UpdateRoleRequest
from ..models.product import Book, BookCreate, BookUpdate, StockAdjustment
from ..models.review import Review, ReviewVisibilityRequest
from ..database.carts import cart_db
from ..database.coupons import CouponConflict, coupon_db
from ..database.customers import customer_db
from ..database.orders import order_db
from ..database.products import product_db
from ..database.reviews import review_db
from ..database.transaction import transaction
from ..security.session import SessionUser, require_admin
from ..services.orders import cancel_order
from ..services.payment_gateway import PaymentGatewayError, RazorpayClient, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


# ==================== Orders ====================

@router.get("/orders", response_model=list[Order])
async def list_all_orders(
    status: Optional[OrderStatus] = Query(None, description="Filter by status"),
    limit: int = Query(100, ge=1, le=500),
    admin: SessionUser = Depends(require_admin),
):
    """List recent orders across all customers"""
    orders = order_db.list_orders(limit=len(order_db.orders))
    if status is not None:
        orders = [o for o in orders if o.status == status]
    return orders[:limit]


@router.put("/orders/{order_id}/status", response_model=Order)
async def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequest,
    admin: SessionUser = Depends(require_admin),
    gateway: RazorpayClient = Depends(get_payment_gateway),
):
    """
    Move an order through its lifecycle.

    Cancelling restores stock and refunds paid orders.
    """
    order = order_db.get_order(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    if request.status == OrderStatus.CANCELLED:
        try:
            order = await cancel_order(order, gateway)
        except PaymentGatewayError as e:
            logger.error(f"Refund failed for order {order.order_id}: {e}")
            raise HTTPException(status_code=502, detail="Failed to process refund")
    else:
        with transaction():
            order = order_db.update_status(order_id, request.status)
            # Cash is collected on delivery
            if order.status == OrderStatus.DELIVERED and order.payment_method == PaymentMethod.CASH_ON_DELIVERY:
                order_db.update_payment(order_id, PaymentStatus.PAID)

    logger.info(f"Order {order_id} moved to {order.status.value} by {admin.user_id}")
    return order


# ==================== Coupons ====================

@router.get("/coupons", response_model=list[Coupon])
async def list_coupons(admin: SessionUser = Depends(require_admin)):
    return coupon_db.list_coupons()


@router.post("/coupons", response_model=Coupon, status_code=201)
async def create_coupon(request: CouponInput, admin: SessionUser = Depends(require_admin)):
    """Create a coupon; codes are stored upper-cased"""
    try:
        coupon = coupon_db.create_coupon(request)
    except CouponConflict as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Coupon {coupon.code} created by {admin.user_id}")
    return coupon


@router.put("/coupons/{coupon_id}", response_model=Coupon)
async def update_coupon(
    coupon_id: str,
    request: CouponInput,
    admin: SessionUser = Depends(require_admin),
):
    try:
        coupon = coupon_db.update_coupon(coupon_id, request)
    except CouponConflict as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not coupon:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return coupon


@router.delete("/coupons/{coupon_id}", status_code=204)
async def delete_coupon(coupon_id: str, admin: SessionUser = Depends(require_admin)):
    if not coupon_db.delete_coupon(coupon_id):
        raise HTTPException(status_code=404, detail="Coupon not found")


# ==================== Catalog ====================

@router.post("/products", response_model=Book, status_code=201)
async def create_product(request: BookCreate, admin: SessionUser = Depends(require_admin)):
    book = product_db.create_product(request)
    logger.info(f"Book {book.id} ({book.title}) added by {admin.user_id}")
    return book


@router.patch("/products/{product_id}", response_model=Book)
async def update_product(
    product_id: str,
    request: BookUpdate,
    admin: SessionUser = Depends(require_admin),
):
    book = product_db.update_product(product_id, request)
    if not book:
        raise HTTPException(status_code=404, detail="Product not found")
    return book


@router.delete("/products/{product_id}", status_code=204)
async def delete_product(product_id: str, admin: SessionUser = Depends(require_admin)):
    """Remove a book from the catalog, every cart and its reviews"""
    if not product_db.delete_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    removed = cart_db.purge_product(product_id)
    reviews = review_db.purge_product(product_id)
    logger.info(
        f"Book {product_id} deleted by {admin.user_id}, "
        f"removed from {removed} cart lines and {reviews} reviews"
    )


@router.post("/products/{product_id}/stock", response_model=Book)
async def adjust_stock(
    product_id: str,
    request: StockAdjustment,
    admin: SessionUser = Depends(require_admin),
):
    if not product_db.get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    if not product_db.update_stock(product_id, request.quantity_change):
        raise HTTPException(status_code=400, detail="Stock cannot go below zero")
    return product_db.get_product(product_id)


# ==================== Analytics ====================

@router.get("/analytics", response_model=AnalyticsSummary)
async def analytics(
    top: int = Query(5, ge=1, le=50),
    admin: SessionUser = Depends(require_admin),
):
    """Revenue and order counts for the dashboard"""
    orders = list(order_db.orders.values())
    live_orders = [o for o in orders if o.status != OrderStatus.CANCELLED]
    revenue_orders = [o for o in orders if o.counts_as_revenue]

    units: dict[str, int] = defaultdict(int)
    revenue: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    titles: dict[str, str] = {}
    for order in live_orders:
        for item in order.items:
            units[item.product_id] += item.quantity
            revenue[item.product_id] += item.line_total
            titles[item.product_id] = item.title

    top_products = sorted(
        (
            ProductRevenue(
                product_id=pid,
                title=titles[pid],
                units_sold=units[pid],
                revenue=to_money(revenue[pid]),
            )
            for pid in units
        ),
        key=lambda p: p.revenue,
        reverse=True,
    )[:top]

    return AnalyticsSummary(
        total_revenue=to_money(sum((o.total for o in revenue_orders), Decimal("0"))),
        total_orders=len(live_orders),
        total_products=len(product_db.products),
        total_customers=len({o.user_id for o in orders}),
        top_products=top_products,
    )


# ==================== Customers ====================

@router.get("/customers", response_model=list[CustomerSummary])
async def list_customers(
    role: Optional[Role] = Query(None, description="Filter by role"),
    admin: SessionUser = Depends(require_admin),
):
    """Customers with their order totals and review counts"""
    summaries = []
    for customer in customer_db.list_customers(role=role):
        orders = order_db.list_orders(limit=len(order_db.orders), user_id=customer.user_id)
        summaries.append(
            CustomerSummary(
                customer=customer,
                order_count=len(orders),
                total_spent=to_money(sum((o.total for o in orders if o.counts_as_revenue), Decimal("0"))),
                review_count=len(review_db.list_reviews(user_id=customer.user_id)),
            )
        )
    return summaries


@router.put("/customers/{user_id}/role", response_model=Customer)
async def update_customer_role(
    user_id: str,
    request: UpdateRoleRequest,
    admin: SessionUser = Depends(require_admin),
):
    """Promote a customer to admin or demote an admin"""
    if user_id == admin.user_id:
        raise HTTPException(status_code=400, detail="You cannot change your own role")

    customer = customer_db.set_role(user_id, request.role)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    logger.info(f"Customer {user_id} set to {request.role.value} by {admin.user_id}")
    return customer


# ==================== Reviews ====================

@router.get("/reviews", response_model=list[Review])
async def list_reviews(
    product_id: Optional[str] = Query(None, description="Filter by book"),
    visible: Optional[bool] = Query(None, description="Filter by visibility"),
    admin: SessionUser = Depends(require_admin),
):
    return review_db.list_reviews(product_id=product_id, visible=visible)


@router.put("/reviews/{review_id}/visibility", response_model=Review)
async def moderate_review(
    review_id: str,
    request: ReviewVisibilityRequest,
    admin: SessionUser = Depends(require_admin),
):
    """Hide a review from the storefront or publish it again"""
    review = review_db.set_visibility(review_id, request.is_visible)
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    logger.info(f"Review {review_id} {'published' if review.is_visible else 'hidden'} by {admin.user_id}")
    return review


@router.delete("/reviews/{review_id}", status_code=204)
async def delete_review(review_id: str, admin: SessionUser = Depends(require_admin)):
    if not review_db.delete_review(review_id):
        raise HTTPException(status_code=404, detail="Review not found")
    logger.info(f"Review {review_id} deleted by {admin.user_id}")
