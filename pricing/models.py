"""Pricing Data Models"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union


@dataclass(frozen=True)
class PhysicalItem:
    """Printed copy in a cart or order, limited by stock"""
    product_id: str
    quantity: int

    @property
    def is_ebook(self) -> bool:
        return False


@dataclass(frozen=True)
class EbookItem:
    """Digital copy in a cart or order, never stock limited"""
    product_id: str
    quantity: int

    @property
    def is_ebook(self) -> bool:
        return True


LineItem = Union[PhysicalItem, EbookItem]


def make_line_item(product_id: str, quantity: int, is_ebook: bool) -> LineItem:
    """Build the right line item kind from a flat is_ebook flag"""
    if is_ebook:
        return EbookItem(product_id=product_id, quantity=quantity)
    return PhysicalItem(product_id=product_id, quantity=quantity)


@dataclass(frozen=True)
class ProductPrices:
    """Price fields of a book as seen by the pricing engine"""
    product_id: str
    price: Decimal
    title: str = ""
    discounted_price: Optional[Decimal] = None
    ebook_price: Optional[Decimal] = None
    ebook_discounted: Optional[Decimal] = None
    stock: int = 0


@dataclass(frozen=True)
class CouponRules:
    """Discount rule identified by a code"""
    code: str
    discount_percent: Decimal
    max_discount: Decimal
    min_order_value: Decimal
    usage_limit: int
    used_count: int
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    category_id: Optional[str] = None


@dataclass(frozen=True)
class LinePrice:
    """Priced snapshot of one line item"""
    product_id: str
    title: str
    is_ebook: bool
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass
class PriceBreakdown:
    """Result of pricing a cart or order"""
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    total: Decimal
    lines: list[LinePrice] = field(default_factory=list)
    applied_coupon_code: Optional[str] = None
    coupon_error: Optional[Exception] = None

    @property
    def has_coupon_error(self) -> bool:
        return self.coupon_error is not None
