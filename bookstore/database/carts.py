"""Cart storage for the bookstore"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from ..models.cart import Cart, CartItem
from .transaction import transaction


class CartDatabase:
    """In-memory carts, one per user"""

    def __init__(self):
        self.carts: dict[str, Cart] = {}

    def reset(self) -> None:
        with transaction():
            self.carts = {}

    def get_cart(self, user_id: str) -> Optional[Cart]:
        """Get a user's cart"""
        return self.carts.get(user_id)

    def get_or_create_cart(self, user_id: str) -> Cart:
        """Get the user's cart, creating an empty one on first use"""
        with transaction():
            cart = self.carts.get(user_id)
            if cart is None:
                now = datetime.now(timezone.utc)
                cart = Cart(user_id=user_id, items=[], created_at=now, updated_at=now)
                self.carts[user_id] = cart
            return cart

    def find_item(self, user_id: str, item_id: str) -> Optional[CartItem]:
        cart = self.get_cart(user_id)
        if not cart:
            return None
        return next((item for item in cart.items if item.item_id == item_id), None)

    def find_matching_item(
        self,
        user_id: str,
        product_id: str,
        is_ebook: bool,
    ) -> Optional[CartItem]:
        """Existing line for the same book and edition, if any"""
        cart = self.get_cart(user_id)
        if not cart:
            return None
        return next(
            (
                item for item in cart.items
                if item.product_id == product_id and item.is_ebook == is_ebook
            ),
            None,
        )

    def add_item(
        self,
        user_id: str,
        product_id: str,
        quantity: int = 1,
        is_ebook: bool = False,
    ) -> Cart:
        """Add a book to the cart, merging with an existing line"""
        with transaction():
            cart = self.get_or_create_cart(user_id)
            existing_item = self.find_matching_item(user_id, product_id, is_ebook)

            if existing_item:
                existing_item.quantity += quantity
            else:
                cart.items.append(
                    CartItem(
                        item_id=uuid.uuid4().hex,
                        product_id=product_id,
                        is_ebook=is_ebook,
                        quantity=quantity,
                    )
                )

            cart.updated_at = datetime.now(timezone.utc)
            return cart

    def update_item_quantity(
        self,
        user_id: str,
        item_id: str,
        quantity: int,
    ) -> Optional[Cart]:
        """Update item quantity in cart; zero removes the item"""
        with transaction():
            cart = self.get_cart(user_id)
            if not cart:
                return None

            item = self.find_item(user_id, item_id)
            if not item:
                return None

            if quantity <= 0:
                cart.items = [i for i in cart.items if i.item_id != item_id]
            else:
                item.quantity = quantity

            cart.updated_at = datetime.now(timezone.utc)
            return cart

    def remove_item(self, user_id: str, item_id: str) -> Optional[Cart]:
        """Remove an item from the cart"""
        return self.update_item_quantity(user_id, item_id, 0)

    def purge_product(self, product_id: str) -> int:
        """Drop a book from every cart; returns the number of lines removed"""
        removed = 0
        with transaction():
            for cart in self.carts.values():
                kept = [i for i in cart.items if i.product_id != product_id]
                removed += len(cart.items) - len(kept)
                cart.items = kept
        return removed

    def clear_cart(self, user_id: str) -> Cart:
        """Clear all items from cart"""
        with transaction():
            cart = self.get_or_create_cart(user_id)
            cart.items = []
            cart.updated_at = datetime.now(timezone.utc)
            return cart


# Singleton instance
cart_db = CartDatabase()
