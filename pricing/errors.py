"""
Pricing errors.

Each error carries a stable ``kind`` so callers can pick a user-facing
message per failure without parsing text.
"""

from decimal import Decimal
from typing import Optional


class PricingError(Exception):
    """Base exception for pricing and order rule failures"""

    kind = "PricingError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class InvalidQuantity(PricingError):
    kind = "InvalidQuantity"

    def __init__(self, product_id: str, quantity: int):
        super().__init__(f"Quantity must be at least 1 (got {quantity} for {product_id})")
        self.product_id = product_id
        self.quantity = quantity


class InsufficientStock(PricingError):
    kind = "InsufficientStock"

    def __init__(self, product_id: str, requested: int, available: int, title: str = ""):
        super().__init__(
            f"Insufficient stock for {title or product_id}. Available: {available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class ProductNotFound(PricingError):
    kind = "ProductNotFound"

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class CouponNotFound(PricingError):
    kind = "CouponNotFound"

    def __init__(self, code: Optional[str] = None):
        super().__init__("Invalid coupon code" if not code else f"Invalid coupon code: {code}")
        self.code = code


class CouponInactive(PricingError):
    kind = "CouponInactive"

    def __init__(self, code: str):
        super().__init__(f"Coupon {code} is disabled")
        self.code = code


class CouponExpired(PricingError):
    kind = "CouponExpired"

    def __init__(self, code: str):
        super().__init__(f"Coupon {code} is not active at this time")
        self.code = code


class CouponExhausted(PricingError):
    kind = "CouponExhausted"

    def __init__(self, code: str):
        super().__init__(f"Coupon {code} usage limit reached")
        self.code = code


class MinimumOrderNotMet(PricingError):
    kind = "MinimumOrderNotMet"

    def __init__(self, code: str, min_order_value: Decimal):
        super().__init__(f"Minimum order value is {min_order_value} for coupon {code}")
        self.code = code
        self.min_order_value = min_order_value


class InvalidStatusTransition(PricingError):
    kind = "InvalidStatusTransition"

    def __init__(self, current: str, target: str):
        super().__init__(f"Invalid status transition from {current} to {target}")
        self.current = current
        self.target = target
