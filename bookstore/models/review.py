"""Review models for the bookstore"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Review(BaseModel):
    """Customer review of a book"""
    id: str
    product_id: str
    user_id: str
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None
    is_visible: bool = True
    created_at: datetime
    updated_at: datetime


class ReviewInput(BaseModel):
    """Request to review a delivered book"""
    product_id: str
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)


class ReviewUpdate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)


class ReviewVisibilityRequest(BaseModel):
    """Admin request to hide or publish a review"""
    is_visible: bool


class ProductReviews(BaseModel):
    """Published reviews of a book"""
    product_id: str
    average_rating: Optional[float] = None
    review_count: int
    reviews: list[Review]
