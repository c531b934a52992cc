"""Cart models for the bookstore"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from pricing import LineItem, LinePrice, PriceBreakdown, make_line_item


class CartItem(BaseModel):
    """Item in a shopping cart"""
    item_id: str
    product_id: str
    is_ebook: bool = False
    quantity: int = Field(gt=0)

    def to_line_item(self) -> LineItem:
        return make_line_item(self.product_id, self.quantity, self.is_ebook)


class Cart(BaseModel):
    """Shopping cart owned by one user"""
    user_id: str
    items: list[CartItem] = []
    created_at: datetime
    updated_at: datetime

    def line_items(self) -> list[LineItem]:
        return [item.to_line_item() for item in self.items]


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str
    quantity: int = Field(default=1, gt=0)
    is_ebook: bool = False


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity"""
    quantity: int = Field(gt=0)


class QuoteRequest(BaseModel):
    """Request to preview totals with a coupon"""
    coupon_code: Optional[str] = None


class PricedLine(BaseModel):
    product_id: str
    title: str
    is_ebook: bool
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    @classmethod
    def from_line(cls, line: LinePrice) -> "PricedLine":
        return cls(
            product_id=line.product_id,
            title=line.title,
            is_ebook=line.is_ebook,
            quantity=line.quantity,
            unit_price=line.unit_price,
            line_total=line.line_total,
        )


class CouponErrorInfo(BaseModel):
    kind: str
    message: str


class PriceSummary(BaseModel):
    """Totals shown at cart and checkout time"""
    lines: list[PricedLine] = []
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    total: Decimal
    currency: str = "INR"
    applied_coupon_code: Optional[str] = None
    coupon_error: Optional[CouponErrorInfo] = None

    @classmethod
    def from_breakdown(cls, breakdown: PriceBreakdown, currency: str) -> "PriceSummary":
        error = breakdown.coupon_error
        return cls(
            lines=[PricedLine.from_line(line) for line in breakdown.lines],
            subtotal=breakdown.subtotal,
            discount=breakdown.discount,
            shipping=breakdown.shipping,
            total=breakdown.total,
            currency=currency,
            applied_coupon_code=breakdown.applied_coupon_code,
            coupon_error=CouponErrorInfo(**error.to_dict()) if error else None,
        )


class CartResponse(BaseModel):
    """Cart API response"""
    cart: Cart
    summary: PriceSummary
    message: Optional[str] = None
