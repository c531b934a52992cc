"""Checkout and order models for the bookstore"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from pricing import LinePrice, OrderStatus


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"
    ONLINE = "ONLINE"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class ShippingAddress(BaseModel):
    """Shipping address for printed books"""
    name: str
    phone: str
    street: str
    city: str
    state: str
    pincode: str
    country: str = "India"


class CheckoutRequest(BaseModel):
    """Request to turn the current cart into an order"""
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    shipping_address: Optional[ShippingAddress] = None
    coupon_code: Optional[str] = None


class OrderItem(BaseModel):
    """Item in an order, priced at checkout time"""
    product_id: str
    title: str
    is_ebook: bool
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    @classmethod
    def from_line(cls, line: LinePrice) -> "OrderItem":
        return cls(
            product_id=line.product_id,
            title=line.title,
            is_ebook=line.is_ebook,
            quantity=line.quantity,
            unit_price=line.unit_price,
            line_total=line.line_total,
        )


class Order(BaseModel):
    """Order snapshot created at checkout"""
    order_id: str
    user_id: str
    status: OrderStatus = OrderStatus.PENDING
    items: list[OrderItem]
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    total: Decimal
    currency: str = "INR"
    coupon_code: Optional[str] = None
    payment_method: PaymentMethod
    payment_status: PaymentStatus = PaymentStatus.PENDING
    shipping_address: Optional[ShippingAddress] = None
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def physical_items(self) -> list[OrderItem]:
        return [item for item in self.items if not item.is_ebook]

    @property
    def counts_as_revenue(self) -> bool:
        """Paid orders and cash-on-delivery orders that were not cancelled"""
        if self.status == OrderStatus.CANCELLED:
            return False
        return (
            self.payment_status == PaymentStatus.PAID
            or self.payment_method == PaymentMethod.CASH_ON_DELIVERY
        )


class CheckoutResponse(BaseModel):
    """Response from checkout"""
    success: bool
    order: Optional[Order] = None
    gateway_key_id: Optional[str] = None
    error_message: Optional[str] = None


class PaymentVerificationRequest(BaseModel):
    """Gateway callback data posted back by the storefront"""
    payment_id: str = Field(min_length=1)
    signature: str = Field(min_length=1)


class PaymentVerificationResponse(BaseModel):
    success: bool
    message: str
    order: Order


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus


class LibraryEntry(BaseModel):
    """E-book owned by a customer"""
    product_id: str
    title: str
    order_id: str
    purchased_at: datetime
