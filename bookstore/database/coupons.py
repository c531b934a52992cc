"""Coupon storage for the bookstore"""

import uuid
from datetime import datetime, time, timezone
from decimal import Decimal
from typing import Optional

from pricing import CouponExhausted, CouponNotFound, validate_coupon

from ..models.coupon import Coupon, CouponInput
from .transaction import transaction


class CouponConflict(ValueError):
    """Raised when a coupon code is taken or its dates are inconsistent"""


def _day_bounds(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    # Coupons run from the start of the first day to the end of the last day
    start_day = datetime.combine(start.date(), time.min, tzinfo=start.tzinfo or timezone.utc)
    end_day = datetime.combine(end.date(), time.max, tzinfo=end.tzinfo or timezone.utc)
    return start_day, end_day


class CouponDatabase:
    """In-memory coupon storage keyed by upper-cased code"""

    def __init__(self):
        self.coupons: dict[str, Coupon] = {}

    def reset(self) -> None:
        with transaction():
            self.coupons = {}

    def get_by_code(self, code: str) -> Optional[Coupon]:
        """Case-insensitive lookup"""
        if not code:
            return None
        return self.coupons.get(code.strip().upper())

    def get_by_id(self, coupon_id: str) -> Optional[Coupon]:
        return next((c for c in self.coupons.values() if c.id == coupon_id), None)

    def list_coupons(self) -> list[Coupon]:
        coupons = list(self.coupons.values())
        coupons.sort(key=lambda c: c.created_at, reverse=True)
        return coupons

    def create_coupon(self, data: CouponInput) -> Coupon:
        """
        Create a coupon.

        Raises:
            CouponConflict: if the code exists or the end date precedes the start
        """
        code = data.code.strip().upper()
        start_date, end_date = _day_bounds(data.start_date, data.end_date)
        if end_date < start_date:
            raise CouponConflict("End date must be after start date")

        with transaction():
            if code in self.coupons:
                raise CouponConflict("A coupon with this code already exists")

            now = datetime.now(timezone.utc)
            coupon = Coupon(
                id=uuid.uuid4().hex,
                code=code,
                description=data.description,
                discount_percent=data.discount_percent,
                max_discount=data.max_discount,
                min_order_value=data.min_order_value,
                usage_limit=data.usage_limit,
                used_count=0,
                start_date=start_date,
                end_date=end_date,
                is_active=data.is_active,
                category_id=data.category_id,
                created_at=now,
                updated_at=now,
            )
            self.coupons[code] = coupon
            return coupon

    def update_coupon(self, coupon_id: str, data: CouponInput) -> Optional[Coupon]:
        """Replace a coupon's rules, keeping its usage count"""
        start_date, end_date = _day_bounds(data.start_date, data.end_date)
        if end_date < start_date:
            raise CouponConflict("End date must be after start date")

        with transaction():
            coupon = self.get_by_id(coupon_id)
            if not coupon:
                return None

            code = data.code.strip().upper()
            if code != coupon.code and code in self.coupons:
                raise CouponConflict("A coupon with this code already exists")
            if data.usage_limit < coupon.used_count:
                raise CouponConflict(
                    f"Usage limit cannot be below the {coupon.used_count} uses already redeemed"
                )

            updated = coupon.model_copy(
                update={
                    "code": code,
                    "description": data.description,
                    "discount_percent": data.discount_percent,
                    "max_discount": data.max_discount,
                    "min_order_value": data.min_order_value,
                    "usage_limit": data.usage_limit,
                    "start_date": start_date,
                    "end_date": end_date,
                    "is_active": data.is_active,
                    "category_id": data.category_id,
                    "updated_at": datetime.now(timezone.utc),
                }
            )
            del self.coupons[coupon.code]
            self.coupons[code] = updated
            return updated

    def delete_coupon(self, coupon_id: str) -> bool:
        with transaction():
            coupon = self.get_by_id(coupon_id)
            if not coupon:
                return False
            del self.coupons[coupon.code]
            return True

    def redeem(self, code: str, subtotal: Decimal, now: datetime) -> Coupon:
        """
        Re-validate a coupon and count one use of it.

        Raises:
            PricingError: any coupon validation failure
        """
        with transaction():
            coupon = self.get_by_code(code)
            if coupon is None:
                raise CouponNotFound(code)

            validate_coupon(coupon.to_rules(), subtotal, now, code=code)
            if coupon.used_count + 1 > coupon.usage_limit:
                raise CouponExhausted(coupon.code)

            coupon.used_count += 1
            coupon.updated_at = now
            return coupon

    def release(self, code: str) -> Optional[Coupon]:
        """Give back one use of a coupon whose order was cancelled"""
        with transaction():
            coupon = self.get_by_code(code)
            if coupon is None or coupon.used_count == 0:
                return None

            coupon.used_count -= 1
            coupon.updated_at = datetime.now(timezone.utc)
            return coupon


# Singleton instance
coupon_db = CouponDatabase()
