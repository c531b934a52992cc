"""
Payment Gateway Client

HTTP client for the Razorpay orders and refunds APIs, plus checkout
signature verification.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

import httpx
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from ..core.config import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Base exception for payment gateway errors"""
    pass


def to_minor_units(amount: Decimal) -> int:
    """Rupees to paise"""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def verify_payment_signature(
    key_secret: str,
    gateway_order_id: str,
    payment_id: str,
    signature: str,
) -> bool:
    """
    Check a checkout signature.

    The gateway signs ``"<order_id>|<payment_id>"`` with HMAC-SHA256 using
    the key secret and sends the hex digest back to the storefront.
    """
    try:
        expected = bytes.fromhex(signature)
    except ValueError:
        return False

    mac = hmac.HMAC(key_secret.encode(), hashes.SHA256())
    mac.update(f"{gateway_order_id}|{payment_id}".encode())
    try:
        mac.verify(expected)
    except InvalidSignature:
        return False
    return True


class RazorpayClient:
    """
    Client for the Razorpay REST API.

    Usage:
        client = RazorpayClient(key_id="rzp_test_...", key_secret="...")
        order = await client.create_order(amount=Decimal("950.00"), currency="INR", receipt="ORD-1")
        ok = client.verify_signature(order["id"], payment_id, signature)
    """

    def __init__(
        self,
        key_id: Optional[str],
        key_secret: Optional[str],
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 30.0,
    ):
        """
        Initialize the gateway client.

        Args:
            key_id: Public key ID, also handed to the storefront checkout widget
            key_secret: Secret used for API auth and signature checks
            base_url: Base URL of the REST API
            timeout: Request timeout in seconds
        """
        self.key_id = key_id
        self._key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self._http_client: Optional[httpx.AsyncClient] = None
        self._timeout = timeout

        if not self.is_configured:
            logger.warning("Razorpay credentials not configured - online payments disabled")

    @property
    def is_configured(self) -> bool:
        return bool(self.key_id and self._key_secret)

    async def close(self) -> None:
        """Close HTTP client"""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._timeout,
                auth=(self.key_id, self._key_secret),
            )
        return self._http_client

    async def _request(self, method: str, path: str, body: dict[str, Any]) -> dict[str, Any]:
        if not self.is_configured:
            raise PaymentGatewayError("Payment configuration error")

        url = f"{self.base_url}{path}"
        try:
            response = await self._client().request(method=method, url=url, json=body)
        except httpx.HTTPError as e:
            logger.error(f"Gateway request failed: {method} {path} - {e}")
            raise PaymentGatewayError(f"Gateway unreachable: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Gateway error: {response.status_code} - {response.text}")
            raise PaymentGatewayError(
                f"Gateway call failed: {response.status_code} - {response.text}"
            )

        return response.json()

    async def create_order(self, amount: Decimal, currency: str, receipt: str) -> dict[str, Any]:
        """
        Create a gateway order for the amount to collect.

        Returns:
            Gateway order; its ``id`` is passed to the checkout widget
        """
        result = await self._request(
            "POST",
            "/orders",
            {
                "amount": to_minor_units(amount),
                "currency": currency,
                "receipt": receipt,
            },
        )
        if not result.get("id"):
            raise PaymentGatewayError(f"Invalid gateway order response: {result}")
        return result

    async def refund(self, payment_id: str, amount: Decimal) -> dict[str, Any]:
        """Refund a captured payment in full or in part"""
        return await self._request(
            "POST",
            f"/payments/{payment_id}/refund",
            {"amount": to_minor_units(amount)},
        )

    def verify_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        if not self._key_secret:
            return False
        return verify_payment_signature(self._key_secret, gateway_order_id, payment_id, signature)


_gateway: Optional[RazorpayClient] = None


def get_payment_gateway() -> RazorpayClient:
    """FastAPI dependency returning the shared gateway client"""
    global _gateway
    if _gateway is None:
        _gateway = RazorpayClient(
            key_id=settings.razorpay_key_id,
            key_secret=settings.razorpay_key_secret,
            base_url=settings.razorpay_base_url,
        )
    return _gateway


async def close_payment_gateway() -> None:
    global _gateway
    if _gateway is not None:
        await _gateway.close()
        _gateway = None
