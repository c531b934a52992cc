"""Coupon API routes for the bookstore"""

from datetime import datetime, timezone
from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from pricing import compute_discount, validate_coupon

from ..models.coupon import CouponValidationResponse
from ..database.coupons import coupon_db
from ..security.session import SessionUser, require_user

router = APIRouter(prefix="/api/coupons", tags=["Coupons"])


@router.get("/validate", response_model=CouponValidationResponse)
async def validate(
    code: str = Query(..., min_length=1, description="Coupon code, any case"),
    total: Decimal = Query(..., ge=0, description="Order subtotal the coupon applies to"),
    user: SessionUser = Depends(require_user),
):
    """
    Check a coupon against an order total.

    Failures come back as 4xx responses carrying the error kind.
    Validation does not use up the coupon.
    """
    coupon = coupon_db.get_by_code(code)
    rules = validate_coupon(
        coupon.to_rules() if coupon else None,
        total,
        datetime.now(timezone.utc),
        code=code,
    )
    return CouponValidationResponse(coupon=coupon, discount=compute_discount(rules, total))
