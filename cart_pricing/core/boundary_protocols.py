"""Boundary Protocols - contracts between the pure core and the IO shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Pricing authority, product catalog and promotions accessed through Protocol types
    - Implementations provided by infrastructure/ via dependency injection

Design Decisions:
    - Protocol over ABC: the pydantic wire models in schemas/ satisfy these structurally
    - Async in Protocol: boundary methods do IO; core functions using the data stay sync
"""

from collections.abc import Sequence
from typing import Protocol

from cart_pricing.core.cart_types import CatalogProduct
from cart_pricing.core.promotions import DiscountPromotion


class ValidationItemLike(Protocol):
    """One line submitted for price validation."""
    product_id: str
    quantity: int
    expected_unit_price_cents: int


class ValidatedItemLike(Protocol):
    """One line of the pricing authority's verdict."""
    product_id: str
    quantity: int
    is_price_valid: bool


class ValidationResponseLike(Protocol):
    """Authoritative validation result for an item set."""
    is_valid: bool

    @property
    def items(self) -> Sequence[ValidatedItemLike]: ...


class PriceValidator(Protocol):
    """Contract for the pricing authority's validate-price call."""
    async def validate_prices(
        self, items: Sequence[ValidationItemLike],
    ) -> ValidationResponseLike: ...


class ProductCatalog(Protocol):
    """Contract for single-product catalog lookups."""
    async def get_product(self, product_id: str) -> CatalogProduct: ...


class PromotionSource(Protocol):
    """Contract for the pricing authority's promotion lookups."""
    async def get_product_promotion(self, product_id: str) -> DiscountPromotion | None: ...

    async def get_active_promotions(self) -> list[DiscountPromotion]: ...

    async def get_active_promotions_for_products(
        self, product_ids: Sequence[str],
    ) -> list[DiscountPromotion]: ...
