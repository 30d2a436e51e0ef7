"""Cart Summary Routes - totals for authenticated, guest, and catalog-priced carts.

Invariants:
    - Responses carry amounts as fixed 2-decimal strings
    - Empty item lists return the zero summary (no catalog calls)
    - Unknown products are excluded from totals and listed in missing_product_ids
"""

import logging

from fastapi import APIRouter, Depends

from cart_pricing.config import Settings, get_settings
from cart_pricing.core import currency
from cart_pricing.core.cart_types import CartSummary
from cart_pricing.api.dependencies import get_cart_summary_service
from cart_pricing.schemas.cart import (
    AuthenticatedSummaryRequest,
    CartSummaryRequest,
    CartSummaryResponse,
    GuestSummaryRequest,
)
from cart_pricing.services.cart_summary_service import CartSummaryService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cart", tags=["cart"])


def _respond(summary: CartSummary, settings: Settings) -> CartSummaryResponse:
    return CartSummaryResponse.from_summary(
        summary,
        threshold=settings.free_shipping_threshold,
        currency_symbol=settings.currency_symbol,
    )


@router.post("/summary/authenticated", response_model=CartSummaryResponse)
async def authenticated_summary(
    body: AuthenticatedSummaryRequest,
    settings: Settings = Depends(get_settings),
):
    """Summary for a server-priced cart (unit amounts in cents)."""
    summary = currency.calculate_authenticated_cart_summary(
        [line.to_authenticated_item() for line in body.items],
        threshold=settings.free_shipping_threshold,
        shipping_cost=settings.standard_shipping_cost,
    )
    return _respond(summary, settings)


@router.post("/summary/guest", response_model=CartSummaryResponse)
async def guest_summary(
    body: GuestSummaryRequest,
    settings: Settings = Depends(get_settings),
):
    """Summary for a guest cart priced from the catalog entries sent with it."""
    summary = currency.calculate_guest_cart_summary(
        [line.to_guest_item() for line in body.items],
        {pid: product.to_catalog_product() for pid, product in body.products.items()},
        threshold=settings.free_shipping_threshold,
        shipping_cost=settings.standard_shipping_cost,
    )
    return _respond(summary, settings)


@router.post("/summary", response_model=CartSummaryResponse)
async def cart_summary(
    body: CartSummaryRequest,
    service: CartSummaryService = Depends(get_cart_summary_service),
    settings: Settings = Depends(get_settings),
):
    """Discount-aware summary with product data fetched from the catalog."""
    summary = await service.summarize([line.to_guest_item() for line in body.items])
    logger.info(
        "Cart summary computed",
        extra={"item_count": summary.item_count, "path": "/api/v1/cart/summary"},
    )
    return _respond(summary, settings)
