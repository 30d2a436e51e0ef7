"""FastAPI dependencies - settings, the shared pricing client, and per-request services.

Invariants:
    - One PricingAuthorityClient per app, created and closed by the lifespan (app.state)
    - Services are cheap per-request wrappers around the shared client
"""

from fastapi import Depends, Request

from cart_pricing.config import Settings, get_settings
from cart_pricing.infrastructure.pricing_client import PricingAuthorityClient
from cart_pricing.services.cart_summary_service import CartSummaryService
from cart_pricing.services.price_validation import PriceValidationService
from cart_pricing.services.promotion_service import PromotionService


def get_pricing_client(request: Request) -> PricingAuthorityClient:
    return request.app.state.pricing_client


def get_price_validation_service(
    client: PricingAuthorityClient = Depends(get_pricing_client),
) -> PriceValidationService:
    return PriceValidationService(client)


def get_cart_summary_service(
    client: PricingAuthorityClient = Depends(get_pricing_client),
    settings: Settings = Depends(get_settings),
) -> CartSummaryService:
    return CartSummaryService(
        client,
        tax_rate=settings.tax_rate,
        threshold=settings.free_shipping_threshold,
        shipping_cost=settings.standard_shipping_cost,
    )


def get_promotion_service(
    client: PricingAuthorityClient = Depends(get_pricing_client),
) -> PromotionService:
    return PromotionService(client)
