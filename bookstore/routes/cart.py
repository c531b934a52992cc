"""Cart API routes for the bookstore"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from pricing import InsufficientStock

from ..core.config import settings
from ..models.cart import (
    AddToCartRequest,
    Cart,
    CartResponse,
    PriceSummary,
    QuoteRequest,
    UpdateCartItemRequest,
)
from ..database.carts import cart_db
from ..database.products import product_db
from ..security.session import SessionUser, require_user
from ..services.orders import price_cart

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _respond(cart: Cart, message: Optional[str] = None) -> CartResponse:
    summary = PriceSummary.from_breakdown(price_cart(cart), settings.currency)
    return CartResponse(cart=cart, summary=summary, message=message)


@router.get("", response_model=CartResponse)
async def get_cart(user: SessionUser = Depends(require_user)):
    """Get the signed-in user's cart with display-time totals"""
    return _respond(cart_db.get_or_create_cart(user.user_id))


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    user: SessionUser = Depends(require_user),
):
    """Add a book to the cart"""
    product = product_db.get_product(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    if request.is_ebook and not product.has_ebook:
        raise HTTPException(status_code=400, detail=f"{product.title} has no e-book edition")

    if not request.is_ebook:
        existing = cart_db.find_matching_item(user.user_id, product.id, is_ebook=False)
        wanted = request.quantity + (existing.quantity if existing else 0)
        if wanted > product.stock:
            raise InsufficientStock(product.id, wanted, product.stock, title=product.title)

    cart = cart_db.add_item(
        user.user_id,
        product.id,
        quantity=request.quantity,
        is_ebook=request.is_ebook,
    )
    edition = "e-book" if request.is_ebook else "copy"
    return _respond(cart, message=f"Added {request.quantity}x {product.title} ({edition}) to cart")


@router.put("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str,
    request: UpdateCartItemRequest,
    user: SessionUser = Depends(require_user),
):
    """Update item quantity in cart"""
    item = cart_db.find_item(user.user_id, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Cart item not found")

    product = product_db.get_product(item.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    if not item.is_ebook and request.quantity > product.stock:
        raise InsufficientStock(product.id, request.quantity, product.stock, title=product.title)

    cart = cart_db.update_item_quantity(user.user_id, item_id, request.quantity)
    return _respond(cart, message="Cart updated")


@router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_from_cart(
    item_id: str,
    user: SessionUser = Depends(require_user),
):
    """Remove an item from the cart"""
    cart = cart_db.remove_item(user.user_id, item_id)
    if not cart:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return _respond(cart, message="Item removed")


@router.delete("", response_model=CartResponse)
async def clear_cart(user: SessionUser = Depends(require_user)):
    """Clear all items from cart"""
    return _respond(cart_db.clear_cart(user.user_id), message="Cart cleared")


@router.post("/quote", response_model=PriceSummary)
async def quote_cart(
    request: QuoteRequest,
    user: SessionUser = Depends(require_user),
):
    """
    Preview cart totals with a coupon.

    A coupon that cannot be applied leaves the discount at zero and is
    reported in ``coupon_error``.
    """
    cart = cart_db.get_or_create_cart(user.user_id)
    breakdown = price_cart(cart, coupon_code=request.coupon_code)
    return PriceSummary.from_breakdown(breakdown, settings.currency)
