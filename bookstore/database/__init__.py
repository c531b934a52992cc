# Database modules

from .products import product_db, ProductDatabase
from .carts import cart_db, CartDatabase
from .coupons import coupon_db, CouponDatabase, CouponConflict
from .orders import order_db, OrderDatabase
from .wishlists import wishlist_db, WishlistDatabase
from .customers import customer_db, CustomerDatabase
from .reviews import review_db, ReviewDatabase, ReviewConflict
from .transaction import transaction


def reset_stores() -> None:
    """Return every store to its initial contents"""
    with transaction():
        product_db.reset()
        cart_db.reset()
        coupon_db.reset()
        order_db.reset()
        wishlist_db.reset()
        customer_db.reset()
        review_db.reset()


__all__ = [
    "product_db",
    "ProductDatabase",
    "cart_db",
    "CartDatabase",
    "coupon_db",
    "CouponDatabase",
    "CouponConflict",
    "order_db",
    "OrderDatabase",
    "wishlist_db",
    "WishlistDatabase",
    "customer_db",
    "CustomerDatabase",
    "review_db",
    "ReviewDatabase",
    "ReviewConflict",
    "transaction",
    "reset_stores",
]
