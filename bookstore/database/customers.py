"""Customer storage for the bookstore"""

from datetime import datetime, timezone
from typing import Optional

from ..models.customer import Customer, Role
from .transaction import transaction


class CustomerDatabase:
    """
    In-memory customer accounts keyed by user ID.

    Accounts are recorded the first time a session token is seen. After
    that the stored role wins over the role claimed by the token, so an
    admin can promote or demote a customer without reissuing tokens.
    """

    def __init__(self):
        self.customers: dict[str, Customer] = {}

    def reset(self) -> None:
        with transaction():
            self.customers = {}

    def get_customer(self, user_id: str) -> Optional[Customer]:
        return self.customers.get(user_id)

    def record(self, user_id: str, email: Optional[str], role: Role) -> Customer:
        """Create or refresh the account behind a session"""
        now = datetime.now(timezone.utc)
        with transaction():
            customer = self.customers.get(user_id)
            if customer is None:
                customer = Customer(
                    user_id=user_id,
                    email=email,
                    role=role,
                    first_seen_at=now,
                    last_seen_at=now,
                )
                self.customers[user_id] = customer
            else:
                if email:
                    customer.email = email
                customer.last_seen_at = now
            return customer

    def list_customers(self, role: Optional[Role] = None) -> list[Customer]:
        customers = list(self.customers.values())
        if role is not None:
            customers = [c for c in customers if c.role == role]
        customers.sort(key=lambda c: c.first_seen_at, reverse=True)
        return customers

    def set_role(self, user_id: str, role: Role) -> Optional[Customer]:
        with transaction():
            customer = self.customers.get(user_id)
            if not customer:
                return None
            customer.role = role
            return customer


# Singleton instance
customer_db = CustomerDatabase()
