"""Wishlist storage for the bookstore"""

from datetime import datetime, timezone

from ..models.wishlist import Wishlist
from .transaction import transaction


class WishlistDatabase:
    """In-memory wishlists, one per user"""

    def __init__(self):
        self.wishlists: dict[str, Wishlist] = {}

    def reset(self) -> None:
        with transaction():
            self.wishlists = {}

    def get_wishlist(self, user_id: str) -> Wishlist:
        with transaction():
            wishlist = self.wishlists.get(user_id)
            if wishlist is None:
                wishlist = Wishlist(user_id=user_id, updated_at=datetime.now(timezone.utc))
                self.wishlists[user_id] = wishlist
            return wishlist

    def add(self, user_id: str, product_id: str) -> bool:
        """Add a book; returns False if it was already there"""
        with transaction():
            wishlist = self.get_wishlist(user_id)
            if product_id in wishlist.product_ids:
                return False
            wishlist.product_ids.append(product_id)
            wishlist.updated_at = datetime.now(timezone.utc)
            return True

    def remove(self, user_id: str, product_id: str) -> bool:
        with transaction():
            wishlist = self.get_wishlist(user_id)
            if product_id not in wishlist.product_ids:
                return False
            wishlist.product_ids.remove(product_id)
            wishlist.updated_at = datetime.now(timezone.utc)
            return True


# Singleton instance
wishlist_db = WishlistDatabase()
