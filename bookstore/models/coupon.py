"""Coupon models for the bookstore"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from pricing import CouponRules


class Coupon(BaseModel):
    """Stored coupon"""
    id: str
    code: str
    description: Optional[str] = None
    discount_percent: Decimal = Field(ge=0, le=100)
    max_discount: Decimal = Field(ge=0)
    min_order_value: Decimal = Field(ge=0, default=Decimal("0"))
    usage_limit: int = Field(ge=1)
    used_count: int = Field(ge=0, default=0)
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    category_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    def to_rules(self) -> CouponRules:
        return CouponRules(
            code=self.code,
            discount_percent=self.discount_percent,
            max_discount=self.max_discount,
            min_order_value=self.min_order_value,
            usage_limit=self.usage_limit,
            used_count=self.used_count,
            start_date=self.start_date,
            end_date=self.end_date,
            is_active=self.is_active,
            category_id=self.category_id,
        )


class CouponInput(BaseModel):
    """Admin request to create or replace a coupon"""
    code: str = Field(min_length=1, max_length=64)
    description: Optional[str] = None
    discount_percent: Decimal = Field(ge=0, le=100)
    max_discount: Decimal = Field(ge=0)
    min_order_value: Decimal = Field(ge=0, default=Decimal("0"))
    usage_limit: int = Field(ge=1)
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    category_id: Optional[str] = None


class CouponValidationResponse(BaseModel):
    """Coupon accepted for a given order total"""
    coupon: Coupon
    discount: Decimal
