"""Customer models for the bookstore"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class Customer(BaseModel):
    """Account seen through a session token"""
    user_id: str
    email: Optional[str] = None
    role: Role = Role.USER
    first_seen_at: datetime
    last_seen_at: datetime


class CustomerSummary(BaseModel):
    """Customer with order and review activity for the back office"""
    customer: Customer
    order_count: int
    total_spent: Decimal
    review_count: int


class UpdateRoleRequest(BaseModel):
    role: Role
