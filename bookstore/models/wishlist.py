"""Wishlist models for the bookstore"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .product import Book


class Wishlist(BaseModel):
    user_id: str
    product_ids: list[str] = []
    updated_at: datetime


class WishlistResponse(BaseModel):
    books: list[Book]
    message: Optional[str] = None
