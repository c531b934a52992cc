"""
Pricing Engine

Computes line totals, subtotals, coupon discounts and grand totals for
carts and orders. Everything here is pure: no I/O, no clock reads unless
the caller leaves ``now`` out of ``quote``.

All money is handled as ``Decimal`` quantized to two places with
ROUND_HALF_UP, so a total previewed in the cart matches the committed order.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping, Optional, Union

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
)
from .models import CouponRules, LineItem, LinePrice, PriceBreakdown, ProductPrices

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]


def to_money(value: Optional[Number]) -> Decimal:
    """Convert a number to a two-place Decimal (None counts as zero)"""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        # str() first so floats keep their printed value, not their binary one
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _as_utc(moment: datetime) -> datetime:
    # Naive datetimes are treated as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def resolve_unit_price(item: LineItem, product: ProductPrices) -> Decimal:
    """
    Pick the price that applies to a line item.

    E-books use ebook_discounted, then ebook_price, then the base price.
    Printed copies use discounted_price, then the base price.
    """
    if item.is_ebook:
        candidates = (product.ebook_discounted, product.ebook_price, product.price)
    else:
        candidates = (product.discounted_price, product.price)

    for candidate in candidates:
        if candidate is not None:
            return to_money(candidate)
    return ZERO


def compute_line_total(
    item: LineItem,
    product: ProductPrices,
    enforce_stock: bool = False,
) -> Decimal:
    """
    Unit price times quantity.

    Args:
        item: Line item to price
        product: Price fields of the referenced book
        enforce_stock: Check physical stock (checkout time only)

    Raises:
        InvalidQuantity: quantity below 1
        InsufficientStock: physical quantity above stock with enforce_stock
    """
    if item.quantity < 1:
        raise InvalidQuantity(item.product_id, item.quantity)

    if enforce_stock and not item.is_ebook and item.quantity > product.stock:
        raise InsufficientStock(
            product_id=item.product_id,
            requested=item.quantity,
            available=product.stock,
            title=product.title,
        )

    return to_money(resolve_unit_price(item, product) * item.quantity)


def _price_lines(
    items: Iterable[LineItem],
    products: Mapping[str, ProductPrices],
    enforce_stock: bool,
) -> list[LinePrice]:
    lines = []
    for item in items:
        product = products.get(item.product_id)
        if product is None:
            raise ProductNotFound(item.product_id)

        line_total = compute_line_total(item, product, enforce_stock=enforce_stock)
        lines.append(
            LinePrice(
                product_id=item.product_id,
                title=product.title,
                is_ebook=item.is_ebook,
                quantity=item.quantity,
                unit_price=resolve_unit_price(item, product),
                line_total=line_total,
            )
        )
    return lines


def compute_subtotal(
    items: Iterable[LineItem],
    products: Mapping[str, ProductPrices],
    enforce_stock: bool = False,
) -> Decimal:
    """Sum of line totals; an empty cart is exactly zero"""
    lines = _price_lines(items, products, enforce_stock)
    return to_money(sum((line.line_total for line in lines), ZERO))


def validate_coupon(
    coupon: Optional[CouponRules],
    subtotal: Number,
    now: datetime,
    code: Optional[str] = None,
) -> CouponRules:
    """
    Check that a coupon can be applied to a subtotal at a given time.

    Validation is pure: usage counters are only touched when an order
    is committed.

    Args:
        coupon: Coupon found for the code, or None when the lookup failed
        subtotal: Cart subtotal before discount
        now: Time the coupon is being applied
        code: Code the customer typed, compared case-insensitively

    Returns:
        The coupon, unchanged

    Raises:
        CouponNotFound, CouponInactive, CouponExpired, CouponExhausted,
        MinimumOrderNotMet
    """
    if coupon is None:
        raise CouponNotFound(code)

    if code is not None and code.strip().upper() != coupon.code.upper():
        raise CouponNotFound(code)

    if not coupon.is_active:
        raise CouponInactive(coupon.code)

    moment = _as_utc(now)
    if moment < _as_utc(coupon.start_date) or moment > _as_utc(coupon.end_date):
        raise CouponExpired(coupon.code)

    if coupon.used_count >= coupon.usage_limit:
        raise CouponExhausted(coupon.code)

    if to_money(subtotal) < to_money(coupon.min_order_value):
        raise MinimumOrderNotMet(coupon.code, to_money(coupon.min_order_value))

    return coupon


def compute_discount(coupon: Optional[CouponRules], subtotal: Number) -> Decimal:
    """Percentage of the subtotal, capped by max_discount and the subtotal"""
    if coupon is None:
        return ZERO

    subtotal = to_money(subtotal)
    raw = to_money(subtotal * Decimal(str(coupon.discount_percent)) / HUNDRED)
    discount = min(raw, to_money(coupon.max_discount), subtotal)
    return max(discount, ZERO)


def compute_grand_total(
    subtotal: Number,
    discount: Number,
    shipping: Number = ZERO,
) -> Decimal:
    """Subtotal minus discount plus shipping, floored at zero"""
    total = to_money(subtotal) - to_money(discount) + to_money(shipping)
    return max(to_money(total), ZERO)


def quote(
    items: Iterable[LineItem],
    products: Mapping[str, ProductPrices],
    coupon: Optional[CouponRules] = None,
    coupon_code: Optional[str] = None,
    now: Optional[datetime] = None,
    enforce_stock: bool = False,
    shipping: Number = ZERO,
) -> PriceBreakdown:
    """
    Price a set of line items with an optional coupon.

    A coupon that fails validation does not fail the quote: the discount
    drops to zero and the error is returned in ``coupon_error``. Line
    errors (quantity, stock, unknown product) are raised.
    """
    lines = _price_lines(items, products, enforce_stock)
    subtotal = to_money(sum((line.line_total for line in lines), ZERO))

    discount = ZERO
    applied_code = None
    coupon_error: Optional[PricingError] = None

    if coupon is not None or coupon_code:
        moment = now or datetime.now(timezone.utc)
        try:
            valid = validate_coupon(coupon, subtotal, moment, code=coupon_code)
        except PricingError as e:
            coupon_error = e
        else:
            discount = compute_discount(valid, subtotal)
            applied_code = valid.code

    shipping = to_money(shipping)
    return PriceBreakdown(
        subtotal=subtotal,
        discount=discount,
        shipping=shipping,
        total=compute_grand_total(subtotal, discount, shipping),
        lines=lines,
        applied_coupon_code=applied_code,
        coupon_error=coupon_error,
    )
