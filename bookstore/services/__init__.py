# Services: cart pricing, order workflow, payment gateway

from .orders import price_cart, restore_stock, fail_payment, cancel_order
from .payment_gateway import (
    RazorpayClient,
    PaymentGatewayError,
    get_payment_gateway,
    close_payment_gateway,
    verify_payment_signature,
    to_minor_units,
)

__all__ = [
    "price_cart",
    "restore_stock",
    "fail_payment",
    "cancel_order",
    "RazorpayClient",
    "PaymentGatewayError",
    "get_payment_gateway",
    "close_payment_gateway",
    "verify_payment_signature",
    "to_minor_units",
]
