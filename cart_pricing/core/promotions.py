"""Promotions - discount arithmetic for percentage and fixed-amount promotions.

Invariants:
    - A promotion is active iff start_date <= now <= end_date (both inclusive)
    - Fixed-amount discounted prices floor at 0; fixed discount amounts cap at the price
    - best_promotion picks the active promotion with the largest discount amount
    - A quote without an applicable promotion keeps the original price and a zero discount
    - `now` is always injected; nothing here reads the clock
    - Naive datetimes are read as UTC, so naive and aware values compare safely

Design Decisions:
    - Mirrors the pricing authority's rules so the storefront can preview discounted prices;
      the authority's validate-price response stays the source of truth at checkout
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from cart_pricing.core import decimal_value as dv
from cart_pricing.core.domain_types import DiscountType

_HUNDRED = Decimal(100)


def as_utc(moment: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values pass through unchanged."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass(frozen=True)
class DiscountPromotion:
    """A discount promotion applying to a set of products for a time window."""
    id: str
    discount_type: DiscountType
    discount_value: Decimal
    start_date: datetime
    end_date: datetime
    product_ids: frozenset[str] = field(default_factory=frozenset)

    def is_active(self, now: datetime) -> bool:
        return as_utc(self.start_date) <= as_utc(now) <= as_utc(self.end_date)

    def applies_to_product(self, product_id: str) -> bool:
        return product_id in self.product_ids

    def discount_amount(self, original_price: Decimal) -> Decimal:
        """Discount taken off a single unit at `original_price`."""
        if self.discount_type is DiscountType.PERCENTAGE:
            return dv.multiply(original_price, dv.divide(self.discount_value, _HUNDRED))
        if dv.is_greater(self.discount_value, original_price):
            return original_price
        return self.discount_value

    def discounted_price(self, original_price: Decimal) -> Decimal:
        """Unit price after discount; never negative."""
        discounted = dv.subtract(original_price, self.discount_amount(original_price))
        if dv.is_less(discounted, dv.ZERO):
            return Decimal(0)
        return discounted


def best_promotion(
    promotions: Iterable[DiscountPromotion],
    product_id: str,
    original_price: Decimal,
    now: datetime,
) -> DiscountPromotion | None:
    """Active promotion for the product with the largest discount, or None."""
    candidates = [
        p for p in promotions
        if p.applies_to_product(product_id) and p.is_active(now)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda p: p.discount_amount(original_price))


def format_discount_text(discount_type: DiscountType, discount_value: Decimal) -> str:
    """Short Dutch label shown next to a discounted price."""
    if discount_type is DiscountType.PERCENTAGE:
        whole = discount_value.quantize(Decimal(1), context=dv.MONEY_CONTEXT)
        return f"{whole:f}% korting"
    return f"€{dv.to_fixed(discount_value, 2)} korting"


# ─── Price quotes ──────────────────────────────────────────────

@dataclass(frozen=True)
class PromotionQuote:
    """Storefront preview of one product's unit price under its best active promotion."""
    product_id: str
    original_price: Decimal
    discounted_price: Decimal
    discount_amount: Decimal
    promotion: DiscountPromotion | None = None

    @property
    def has_discount(self) -> bool:
        return self.promotion is not None and dv.is_greater(self.discount_amount, dv.ZERO)

    @property
    def discount_text(self) -> str | None:
        if self.promotion is None:
            return None
        return format_discount_text(self.promotion.discount_type, self.promotion.discount_value)


def quote_price(
    promotions: Iterable[DiscountPromotion],
    product_id: str,
    original_price: Decimal,
    now: datetime,
) -> PromotionQuote:
    """Best-promotion quote for a unit price; undiscounted when nothing applies."""
    promotion = best_promotion(promotions, product_id, original_price, now)
    if promotion is None:
        return PromotionQuote(product_id, original_price, original_price, Decimal(0))
    return PromotionQuote(
        product_id,
        original_price,
        promotion.discounted_price(original_price),
        promotion.discount_amount(original_price),
        promotion,
    )
