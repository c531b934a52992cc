# Bookstore Models

from .product import (
    Book,
    BookCreate,
    BookUpdate,
    StockAdjustment,
    ProductSearchResponse,
    BestsellerEntry,
)
from .cart import (
    Cart,
    CartItem,
    AddToCartRequest,
    UpdateCartItemRequest,
    QuoteRequest,
    PriceSummary,
    CartResponse,
)
from .coupon import Coupon, CouponInput, CouponValidationResponse
from .checkout import (
    Order,
    OrderItem,
    OrderStatus,
    CheckoutRequest,
    CheckoutResponse,
    ShippingAddress,
    PaymentMethod,
    PaymentStatus,
    PaymentVerificationRequest,
    PaymentVerificationResponse,
    UpdateOrderStatusRequest,
    LibraryEntry,
)
from .wishlist import Wishlist, WishlistResponse
from .analytics import AnalyticsSummary, ProductRevenue
from .customer import Customer, CustomerSummary, Role, UpdateRoleRequest
from .review import (
    Review,
    ReviewInput,
    ReviewUpdate,
    ReviewVisibilityRequest,
    ProductReviews,
)

__all__ = [
    "Book",
    "BookCreate",
    "BookUpdate",
    "StockAdjustment",
    "ProductSearchResponse",
    "BestsellerEntry",
    "Cart",
    "CartItem",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "QuoteRequest",
    "PriceSummary",
    "CartResponse",
    "Coupon",
    "CouponInput",
    "CouponValidationResponse",
    "Order",
    "OrderItem",
    "OrderStatus",
    "CheckoutRequest",
    "CheckoutResponse",
    "ShippingAddress",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentVerificationRequest",
    "PaymentVerificationResponse",
    "UpdateOrderStatusRequest",
    "LibraryEntry",
    "Wishlist",
    "WishlistResponse",
    "AnalyticsSummary",
    "ProductRevenue",
    "Customer",
    "CustomerSummary",
    "Role",
    "UpdateRoleRequest",
    "Review",
    "ReviewInput",
    "ReviewUpdate",
    "ReviewVisibilityRequest",
    "ProductReviews",
]
