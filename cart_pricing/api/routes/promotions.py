"""Promotion Routes - active promotions and discounted price previews for the storefront.

Invariants:
    - Only promotions active right now are listed or applied
    - A product without a running promotion returns null (200), not 404
    - Authority failures surface through the global PricingError handler
"""

from fastapi import APIRouter, Depends

from cart_pricing.api.dependencies import get_promotion_service
from cart_pricing.schemas.promotions import (
    PromotionOut,
    PromotionQuoteOut,
    PromotionQuoteRequest,
    PromotionQuoteResponse,
)
from cart_pricing.services.promotion_service import PromotionService

router = APIRouter(prefix="/api/v1/promotions", tags=["promotions"])


@router.get("/active", response_model=list[PromotionOut])
async def active_promotions(
    service: PromotionService = Depends(get_promotion_service),
):
    promotions = await service.active_promotions()
    return [PromotionOut.from_promotion(p) for p in promotions]


@router.get("/product/{product_id}", response_model=PromotionOut | None)
async def product_promotion(
    product_id: str,
    service: PromotionService = Depends(get_promotion_service),
):
    promotion = await service.product_promotion(product_id)
    if promotion is None:
        return None
    return PromotionOut.from_promotion(promotion)


@router.post("/quote", response_model=PromotionQuoteResponse)
async def quote_prices(
    body: PromotionQuoteRequest,
    service: PromotionService = Depends(get_promotion_service),
):
    quotes = await service.quote([(line.product_id, line.unit_price) for line in body.items])
    items = [PromotionQuoteOut.from_quote(q) for q in quotes]
    return PromotionQuoteResponse(
        items=items, has_discounts=any(item.has_discount for item in items),
    )
