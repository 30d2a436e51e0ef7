"""Cart Pricing API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PricingError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - One pricing authority client per process, opened and closed by the lifespan

Design Decisions:
    - Lifespan over @app.on_event: cleanup of the httpx client on shutdown
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cart_pricing.api.error_handlers import register_error_handlers
from cart_pricing.api.routes import cart, health, pricing, promotions
from cart_pricing.config import get_settings
from cart_pricing.infrastructure.observability import setup_logging
from cart_pricing.infrastructure.pricing_client import PricingAuthorityClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.pricing_client = PricingAuthorityClient(
        settings.pricing_api_base_url,
        timeout_seconds=settings.pricing_api_timeout_seconds,
    )
    logger.info("Cart pricing API started")
    yield
    await app.state.pricing_client.aclose()
    logger.info("Cart pricing API shutting down")


app = FastAPI(
    title="Cart Pricing API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(cart.router)
app.include_router(pricing.router)
app.include_router(promotions.router)

register_error_handlers(app)
