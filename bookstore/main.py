"""
Bookstore Application

Storefront and back office API for an online bookstore: catalog, cart,
coupons, checkout with online or cash-on-delivery payment, orders,
wishlist and e-book library.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from pricing import PricingError

from .core.config import settings
from .routes import (
    products_router,
    cart_router,
    coupons_router,
    checkout_router,
    orders_router,
    wishlist_router,
    reviews_router,
    admin_router,
)
from .security.session import SessionMiddleware
from .services.payment_gateway import close_payment_gateway

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Currency: {settings.currency}, shipping fee: {settings.shipping_fee}")
    logger.info(f"Online payments: {'enabled' if settings.payment_gateway_configured else 'disabled'}")
    yield
    logger.info(f"{settings.app_name} shutting down...")
    await close_payment_gateway()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Online bookstore storefront and back office API",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Session middleware
app.add_middleware(SessionMiddleware)

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(coupons_router)
app.include_router(checkout_router)
app.include_router(orders_router)
app.include_router(wishlist_router)
app.include_router(reviews_router)
app.include_router(admin_router)


def _status_for(error: PricingError) -> int:
    if error.kind.endswith("NotFound"):
        return 404
    if error.kind == "InvalidStatusTransition":
        return 409
    return 400


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    """Return pricing and order rule failures with their kind"""
    return JSONResponse(
        status_code=_status_for(exc),
        content={"detail": exc.message, "error": exc.kind},
    )


@app.get("/")
async def home():
    """API index"""
    return {
        "message": f"{settings.app_name} API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "cart": "/api/cart",
            "coupons": "/api/coupons",
            "checkout": "/api/checkout",
            "orders": "/api/orders",
            "wishlist": "/api/wishlist",
            "reviews": "/api/reviews",
            "admin": "/api/admin",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "bookstore"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookstore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
