"""Wishlist API routes for the bookstore"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..models.wishlist import WishlistResponse
from ..database.products import product_db
from ..database.wishlists import wishlist_db
from ..security.session import SessionUser, require_user

router = APIRouter(prefix="/api/wishlist", tags=["Wishlist"])


def _respond(user_id: str, message: Optional[str]) -> WishlistResponse:
    wishlist = wishlist_db.get_wishlist(user_id)
    books = [
        book for book in (product_db.get_product(pid) for pid in wishlist.product_ids)
        if book is not None
    ]
    return WishlistResponse(books=books, message=message)


@router.get("", response_model=WishlistResponse)
async def get_wishlist(user: SessionUser = Depends(require_user)):
    return _respond(user.user_id, message=None)


@router.post("/{product_id}", response_model=WishlistResponse)
async def add_to_wishlist(product_id: str, user: SessionUser = Depends(require_user)):
    """Save a book for later"""
    if not product_db.get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    added = wishlist_db.add(user.user_id, product_id)
    return _respond(user.user_id, message="Added to wishlist" if added else "Already in wishlist")


@router.delete("/{product_id}", response_model=WishlistResponse)
async def remove_from_wishlist(product_id: str, user: SessionUser = Depends(require_user)):
    if not wishlist_db.remove(user.user_id, product_id):
        raise HTTPException(status_code=404, detail="Book not in wishlist")
    return _respond(user.user_id, message="Removed from wishlist")
