# Bookstore pricing engine
# Line totals, coupon validation, discounts and order status rules

from .engine import (
    resolve_unit_price,
    compute_line_total,
    compute_subtotal,
    validate_coupon,
    compute_discount,
    compute_grand_total,
    quote,
    to_money,
)
from .errors import (
    PricingError,
    InvalidQuantity,
    InsufficientStock,
    ProductNotFound,
    CouponNotFound,
    CouponInactive,
    CouponExpired,
    CouponExhausted,
    MinimumOrderNotMet,
    InvalidStatusTransition,
)
from .lifecycle import OrderStatus, advance, can_transition, is_cancellable, is_terminal
from .models import (
    PhysicalItem,
    EbookItem,
    LineItem,
    make_line_item,
    ProductPrices,
    CouponRules,
    LinePrice,
    PriceBreakdown,
)

__all__ = [
    "resolve_unit_price",
    "compute_line_total",
    "compute_subtotal",
    "validate_coupon",
    "compute_discount",
    "compute_grand_total",
    "quote",
    "to_money",
    "PricingError",
    "InvalidQuantity",
    "InsufficientStock",
    "ProductNotFound",
    "CouponNotFound",
    "CouponInactive",
    "CouponExpired",
    "CouponExhausted",
    "MinimumOrderNotMet",
    "InvalidStatusTransition",
    "OrderStatus",
    "advance",
    "can_transition",
    "is_cancellable",
    "is_terminal",
    "PhysicalItem",
    "EbookItem",
    "LineItem",
    "make_line_item",
    "ProductPrices",
    "CouponRules",
    "LinePrice",
    "PriceBreakdown",
]
