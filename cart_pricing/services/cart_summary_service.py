"""Cart Summary Service - fetches catalog data for a cart, then runs the pure aggregator.

Invariants:
    - Each unique product_id is fetched once per summarize() call
    - A failed lookup omits that product (reported via missing_product_ids), never the whole summary
    - Unexpected (non-PricingError) failures propagate

Design Decisions:
    - Concurrent lookups via asyncio.gather; no caching across calls (prices may change)
"""

import asyncio
import logging
from collections.abc import Sequence
from decimal import Decimal

from cart_pricing.core.boundary_protocols import ProductCatalog
from cart_pricing.core.cart_summary import build_cart_summary
from cart_pricing.core.cart_types import CartItem, CartSummary, CatalogProduct
from cart_pricing.core.errors import CatalogLookupError
from cart_pricing.core.pricing_constants import (
    FREE_SHIPPING_THRESHOLD,
    STANDARD_SHIPPING_COST,
    TAX_RATE,
)

logger = logging.getLogger(__name__)


class CartSummaryService:
    def __init__(
        self,
        catalog: ProductCatalog,
        *,
        tax_rate: Decimal = TAX_RATE,
        threshold: Decimal = FREE_SHIPPING_THRESHOLD,
        shipping_cost: Decimal = STANDARD_SHIPPING_COST,
    ):
        self.catalog = catalog
        self.tax_rate = tax_rate
        self.threshold = threshold
        self.shipping_cost = shipping_cost

    async def fetch_products(
        self, product_ids: Sequence[str],
    ) -> dict[str, CatalogProduct]:
        """Look up every unique id concurrently; failed lookups are logged and left out."""
        unique = list(dict.fromkeys(product_ids))
        results = await asyncio.gather(
            *(self.catalog.get_product(pid) for pid in unique),
            return_exceptions=True,
        )
        products: dict[str, CatalogProduct] = {}
        for product_id, result in zip(unique, results):
            if isinstance(result, CatalogLookupError):
                logger.warning(
                    f"Catalog lookup failed: {result.message}",
                    extra={"product_id": product_id, "error_code": result.code},
                )
                continue
            if isinstance(result, BaseException):
                raise result
            products[product_id] = result
        return products

    async def summarize(self, items: Sequence[CartItem]) -> CartSummary:
        if not items:
            return CartSummary.empty()
        products = await self.fetch_products([item.product_id for item in items])
        return build_cart_summary(
            items,
            products,
            tax_rate=self.tax_rate,
            threshold=self.threshold,
            shipping_cost=self.shipping_cost,
        )
