"""Customer review API routes for the bookstore"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from pricing import OrderStatus

from ..models.review import Review, ReviewInput, ReviewUpdate
from ..database.orders import order_db
from ..database.products import product_db
from ..database.reviews import ReviewConflict, review_db
from ..security.session import SessionUser, require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def _has_received(user_id: str, product_id: str) -> bool:
    orders = order_db.list_orders(limit=len(order_db.orders), user_id=user_id)
    return any(
        order.status == OrderStatus.DELIVERED
        and any(item.product_id == product_id for item in order.items)
        for order in orders
    )


def _get_own_review(review_id: str, user: SessionUser) -> Review:
    review = review_db.get_review(review_id)
    if not review or review.user_id != user.user_id:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@router.get("/mine", response_model=list[Review])
async def my_reviews(user: SessionUser = Depends(require_user)):
    """Reviews written by the signed-in user, hidden ones included"""
    return review_db.list_reviews(user_id=user.user_id)


@router.post("", response_model=Review, status_code=201)
async def create_review(request: ReviewInput, user: SessionUser = Depends(require_user)):
    """Review a book from a delivered order"""
    if not product_db.get_product(request.product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    if not _has_received(user.user_id, request.product_id):
        raise HTTPException(status_code=400, detail="You can only review products you have purchased")

    try:
        review = review_db.create_review(user.user_id, request)
    except ReviewConflict as e:
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(f"Review {review.id} of {review.product_id} by {user.user_id}: {review.rating}/5")
    return review


@router.put("/{review_id}", response_model=Review)
async def update_review(
    review_id: str,
    request: ReviewUpdate,
    user: SessionUser = Depends(require_user),
):
    _get_own_review(review_id, user)
    return review_db.update_review(review_id, request)


@router.delete("/{review_id}", status_code=204)
async def delete_review(review_id: str, user: SessionUser = Depends(require_user)):
    _get_own_review(review_id, user)
    review_db.delete_review(review_id)
