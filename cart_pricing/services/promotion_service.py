"""Promotion Service - storefront promotion lookups and discounted price previews.

Invariants:
    - Only promotions active at `now` are returned or applied, even if the authority
      sends expired or future ones
    - quote() makes one bulk promotions call per request, for the unique product ids
    - A product with no applicable promotion is quoted at its original price
    - Lookup failures propagate (PricingError); previews never invent a discount

Design Decisions:
    - Previews are advisory: checkout still goes through validate-price
    - `now` defaults to the current UTC time and can be injected for tests
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal

from cart_pricing.core.boundary_protocols import PromotionSource
from cart_pricing.core.promotions import DiscountPromotion, PromotionQuote, quote_price

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PromotionService:
    def __init__(self, source: PromotionSource):
        self.source = source

    async def product_promotion(
        self, product_id: str, now: datetime | None = None,
    ) -> DiscountPromotion | None:
        """The authority's promotion for one product, or None when none is running."""
        now = now or _utcnow()
        promotion = await self.source.get_product_promotion(product_id)
        if promotion is None:
            return None
        if not promotion.is_active(now):
            logger.info(
                f"Ignoring inactive promotion {promotion.id}",
                extra={"product_id": product_id},
            )
            return None
        return promotion

    async def active_promotions(self, now: datetime | None = None) -> list[DiscountPromotion]:
        now = now or _utcnow()
        promotions = await self.source.get_active_promotions()
        return [p for p in promotions if p.is_active(now)]

    async def quote(
        self,
        lines: Sequence[tuple[str, Decimal]],
        now: datetime | None = None,
    ) -> list[PromotionQuote]:
        """Quote each (product_id, unit_price) line under its best active promotion."""
        if not lines:
            return []
        now = now or _utcnow()
        product_ids = list(dict.fromkeys(product_id for product_id, _ in lines))
        promotions = await self.source.get_active_promotions_for_products(product_ids)
        quotes = [
            quote_price(promotions, product_id, price, now)
            for product_id, price in lines
        ]
        discounted = sum(1 for q in quotes if q.has_discount)
        if discounted:
            logger.debug(
                f"Promotions apply to {discounted} of {len(quotes)} line(s)",
                extra={"item_count": len(quotes)},
            )
        return quotes
