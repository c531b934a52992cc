"""Shared fixtures for the bookstore tests"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from cryptography.hazmat.primitives import hashes, hmac
from fastapi.testclient import TestClient

from bookstore.database import coupon_db, reset_stores
from bookstore.main import app
from bookstore.models.coupon import CouponInput
from bookstore.security.session import Role, create_session_token
from bookstore.services.payment_gateway import (
    PaymentGatewayError,
    get_payment_gateway,
    to_minor_units,
    verify_payment_signature,
)

GATEWAY_SECRET = "test-gateway-secret"

ADDRESS = {
    "name": "Asha Menon",
    "phone": "9876543210",
    "street": "12 MG Road",
    "city": "Kochi",
    "state": "Kerala",
    "pincode": "682001",
}


def money(value) -> Decimal:
    """Parse an amount from a JSON response"""
    return Decimal(str(value))


def sign_payment(gateway_order_id: str, payment_id: str) -> str:
    mac = hmac.HMAC(GATEWAY_SECRET.encode(), hashes.SHA256())
    mac.update(f"{gateway_order_id}|{payment_id}".encode())
    return mac.finalize().hex()


class FakeGateway:
    """Stands in for the Razorpay client; records calls instead of making them"""

    key_id = "rzp_test_key"
    is_configured = True

    def __init__(self):
        self.orders: list[dict] = []
        self.refunds: list[tuple[str, Decimal]] = []
        self.fail_create = False
        self.fail_refund = False

    async def create_order(self, amount: Decimal, currency: str, receipt: str) -> dict:
        if self.fail_create:
            raise PaymentGatewayError("Gateway unreachable")
        order = {
            "id": f"order_{len(self.orders) + 1:04d}",
            "amount": to_minor_units(amount),
            "currency": currency,
            "receipt": receipt,
        }
        self.orders.append(order)
        return order

    async def refund(self, payment_id: str, amount: Decimal) -> dict:
        if self.fail_refund:
            raise PaymentGatewayError("Refund rejected")
        self.refunds.append((payment_id, amount))
        return {"id": f"rfnd_{len(self.refunds)}", "amount": to_minor_units(amount)}

    def verify_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        return verify_payment_signature(GATEWAY_SECRET, gateway_order_id, payment_id, signature)

    async def close(self) -> None:
        pass


@pytest.fixture(autouse=True)
def clean_stores():
    reset_stores()
    yield
    reset_stores()


@pytest.fixture
def gateway():
    fake = FakeGateway()
    app.dependency_overrides[get_payment_gateway] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client(gateway):
    with TestClient(app) as test_client:
        yield test_client


def _headers(user_id: str, role: Role = Role.USER) -> dict[str, str]:
    token = create_session_token(user_id, email=f"{user_id}@example.com", role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    return _headers("reader-1")


@pytest.fixture
def other_user_headers():
    return _headers("reader-2")


@pytest.fixture
def admin_headers():
    return _headers("admin-1", role=Role.ADMIN)


@pytest.fixture
def make_coupon():
    """Create a coupon directly in the store, valid from yesterday for a month"""

    def factory(**overrides):
        today = datetime.now(timezone.utc)
        fields = {
            "code": "SAVE10",
            "discount_percent": Decimal("10"),
            "max_discount": Decimal("50"),
            "min_order_value": Decimal("500"),
            "usage_limit": 100,
            "start_date": today - timedelta(days=1),
            "end_date": today + timedelta(days=30),
            "is_active": True,
        }
        fields.update(overrides)
        return coupon_db.create_coupon(CouponInput(**fields))

    return factory
