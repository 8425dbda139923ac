"""
Doctor Planet - Backend API
Storefront, point of sale and back-office for a medical apparel boutique
"""
import logging
import time
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables before settings are read
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import (
    admin_orders,
    admin_products,
    auth,
    banners,
    bill_settings,
    cart,
    catalog,
    categories,
    deals,
    discounts,
    expenses,
    messages,
    newsletter,
    notifications,
    orders,
    pages,
    pos,
    profile,
    revenue,
    salesman_profile,
    salesmen,
    settings as site_settings,
    shops,
    team,
    testimonials,
    udhar,
    upload,
    wishlist,
)
from app.core.config import settings
from app.core.database import CONNECTION_TIMEOUT, check_db_connection_with_retry
from app.core.rate_limit import RateLimitMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
)

app.add_middleware(RateLimitMiddleware)

# Added last: CORS must wrap the rate limiter
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "Retry-After"],
)

# ============================================================================
# Storefront
# ============================================================================
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(profile.router, prefix="/api/v1/profile", tags=["Profile"])
app.include_router(catalog.products_router, prefix="/api/v1/products", tags=["Products"])
app.include_router(catalog.search_router, prefix="/api/v1/search", tags=["Products"])
app.include_router(categories.router, prefix="/api/v1/categories", tags=["Categories"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])
app.include_router(wishlist.router, prefix="/api/v1/wishlist", tags=["Wishlist"])
app.include_router(discounts.public_router, prefix="/api/v1/global-discount", tags=["Discounts"])
app.include_router(deals.public_router, prefix="/api/v1/deals", tags=["Deals"])
app.include_router(pages.public_router, prefix="/api/v1/pages", tags=["Pages"])
app.include_router(site_settings.public_router, prefix="/api/v1/settings", tags=["Settings"])
app.include_router(testimonials.public_router, prefix="/api/v1/testimonials", tags=["Testimonials"])
app.include_router(team.public_router, prefix="/api/v1/team", tags=["Team"])
app.include_router(banners.hero_public_router, prefix="/api/v1/hero-banners", tags=["Banners"])
app.include_router(banners.promo_public_router, prefix="/api/v1/promo-banners", tags=["Banners"])
app.include_router(messages.public_router, prefix="/api/v1/contact", tags=["Messages"])
app.include_router(newsletter.public_router, prefix="/api/v1/newsletter", tags=["Newsletter"])

# ============================================================================
# Point of sale and credit
# ============================================================================
app.include_router(pos.router, prefix="/api/v1/pos", tags=["POS"])
app.include_router(shops.router, prefix="/api/v1/shops", tags=["Shops"])
app.include_router(udhar.router, prefix="/api/v1/udhar", tags=["Udhar"])
app.include_router(expenses.router, prefix="/api/v1/expenses", tags=["Expenses"])
app.include_router(upload.router, prefix="/api/v1/upload", tags=["Upload"])
app.include_router(salesman_profile.router, prefix="/api/v1/salesman/profile", tags=["Salesmen"])
app.include_router(bill_settings.router, prefix="/api/v1/admin/bill-settings", tags=["Bill Settings"])

# ============================================================================
# Admin
# ============================================================================
app.include_router(admin_products.router, prefix="/api/v1/admin/products", tags=["Admin Products"])
app.include_router(admin_orders.router, prefix="/api/v1/admin/orders", tags=["Admin Orders"])
app.include_router(discounts.admin_router, prefix="/api/v1/admin/global-discount", tags=["Discounts"])
app.include_router(deals.admin_router, prefix="/api/v1/admin/deals", tags=["Deals"])
app.include_router(pages.admin_router, prefix="/api/v1/admin/pages", tags=["Pages"])
app.include_router(site_settings.admin_router, prefix="/api/v1/admin/settings", tags=["Settings"])
app.include_router(testimonials.admin_router, prefix="/api/v1/admin/testimonials", tags=["Testimonials"])
app.include_router(team.admin_router, prefix="/api/v1/admin/team", tags=["Team"])
app.include_router(banners.hero_admin_router, prefix="/api/v1/admin/hero-banners", tags=["Banners"])
app.include_router(banners.promo_admin_router, prefix="/api/v1/admin/promo-banners", tags=["Banners"])
app.include_router(notifications.router, prefix="/api/v1/admin/notifications", tags=["Notifications"])
app.include_router(messages.admin_router, prefix="/api/v1/admin/messages", tags=["Messages"])
app.include_router(newsletter.admin_router, prefix="/api/v1/admin/subscribers", tags=["Newsletter"])
app.include_router(salesmen.router, prefix="/api/v1/admin/salesmen", tags=["Salesmen"])
app.include_router(revenue.router, prefix="/api/v1/admin/revenue", tags=["Revenue"])


@app.get("/")
async def root():
    """Root endpoint - API status check"""
    return {
        "message": "Doctor Planet API",
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
async def health():
    """Health check endpoint for monitoring - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        # Minimal retry for a fast check
        db_latency_ms = check_db_connection_with_retry(max_retries=1, retry_delay=0.5)
        db_status = "connected"
    except Exception as e:
        logger.warning(f"Health check database error: {e}")
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "doctor-planet-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
            "connection_timeout_s": CONNECTION_TIMEOUT,
        },
        "total_latency_ms": total_latency_ms,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.API_DEBUG)
