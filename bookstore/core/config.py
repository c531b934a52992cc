"""Bookstore Service Configuration"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Bookstore"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Pricing
    currency: str = "INR"
    shipping_fee: Decimal = Decimal("0.00")  # Free shipping

    # Sessions
    session_secret: str = "change-me-in-production"
    session_algorithm: str = "HS256"
    session_ttl_minutes: int = 60 * 24

    # Razorpay payment gateway
    razorpay_base_url: str = "https://api.razorpay.com/v1"
    razorpay_key_id: Optional[str] = None
    razorpay_key_secret: Optional[str] = None

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def payment_gateway_configured(self) -> bool:
        """Check if gateway credentials are configured"""
        return all([self.razorpay_key_id, self.razorpay_key_secret])


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
