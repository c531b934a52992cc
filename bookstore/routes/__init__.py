# API Routes

from .products import router as products_router
from .cart import router as cart_router
from .coupons import router as coupons_router
from .checkout import router as checkout_router
from .orders import router as orders_router
from .wishlist import router as wishlist_router
from .reviews import router as reviews_router
from .admin import router as admin_router

__all__ = [
    "products_router",
    "cart_router",
    "coupons_router",
    "checkout_router",
    "orders_router",
    "wishlist_router",
    "reviews_router",
    "admin_router",
]
