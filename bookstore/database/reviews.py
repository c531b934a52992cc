"""Review storage for the bookstore"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from ..models.review import Review, ReviewInput, ReviewUpdate
from .transaction import transaction


class ReviewConflict(ValueError):
    """Raised when a customer reviews the same book twice"""


class ReviewDatabase:
    """In-memory reviews, at most one per customer and book"""

    def __init__(self):
        self.reviews: dict[str, Review] = {}

    def reset(self) -> None:
        with transaction():
            self.reviews = {}

    def get_review(self, review_id: str) -> Optional[Review]:
        return self.reviews.get(review_id)

    def find(self, user_id: str, product_id: str) -> Optional[Review]:
        return next(
            (r for r in self.reviews.values() if r.user_id == user_id and r.product_id == product_id),
            None,
        )

    def list_reviews(
        self,
        product_id: Optional[str] = None,
        user_id: Optional[str] = None,
        visible: Optional[bool] = None,
    ) -> list[Review]:
        """List reviews newest first, filtered by book, author or visibility"""
        reviews = list(self.reviews.values())
        if product_id is not None:
            reviews = [r for r in reviews if r.product_id == product_id]
        if user_id is not None:
            reviews = [r for r in reviews if r.user_id == user_id]
        if visible is not None:
            reviews = [r for r in reviews if r.is_visible == visible]
        reviews.sort(key=lambda r: r.created_at, reverse=True)
        return reviews

    def create_review(self, user_id: str, data: ReviewInput) -> Review:
        """
        Create a review.

        Raises:
            ReviewConflict: if the customer already reviewed this book
        """
        with transaction():
            if self.find(user_id, data.product_id):
                raise ReviewConflict("You have already reviewed this product")

            now = datetime.now(timezone.utc)
            review = Review(
                id=uuid.uuid4().hex,
                product_id=data.product_id,
                user_id=user_id,
                rating=data.rating,
                comment=data.comment,
                created_at=now,
                updated_at=now,
            )
            self.reviews[review.id] = review
            return review

    def update_review(self, review_id: str, data: ReviewUpdate) -> Optional[Review]:
        with transaction():
            review = self.reviews.get(review_id)
            if not review:
                return None
            review.rating = data.rating
            review.comment = data.comment
            review.updated_at = datetime.now(timezone.utc)
            return review

    def set_visibility(self, review_id: str, is_visible: bool) -> Optional[Review]:
        with transaction():
            review = self.reviews.get(review_id)
            if not review:
                return None
            review.is_visible = is_visible
            review.updated_at = datetime.now(timezone.utc)
            return review

    def delete_review(self, review_id: str) -> bool:
        with transaction():
            if review_id in self.reviews:
                del self.reviews[review_id]
                return True
            return False

    def purge_product(self, product_id: str) -> int:
        """Drop every review of a deleted book"""
        with transaction():
            doomed = [rid for rid, r in self.reviews.items() if r.product_id == product_id]
            for review_id in doomed:
                del self.reviews[review_id]
            return len(doomed)


# Singleton instance
review_db = ReviewDatabase()
