"""Cart Summary Aggregator - discount-aware summary from one cart source plus catalog data.

Invariants:
    - Exactly one item source: server cart when authenticated, client-persisted cart otherwise
    - Pure function of (items, products, rates): no state, recompute on every input change
    - Per-unit subtotal = tax-inclusive price / (1 + tax_rate); tax = discounted subtotal * rate
    - Shipping is computed from the DISCOUNTED price_total
    - total_savings = original_total - price_total; has_discounts iff any discounted < price
    - Products missing from the catalog map are excluded and listed in missing_product_ids

Design Decisions:
    - Lives in core/ (no IO); services/cart_summary_service.py performs the catalog fetches
    - A discounted_price of 0 is honored (explicit None check), unlike a truthiness fallback
"""

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal

from cart_pricing.core import currency
from cart_pricing.core.cart_types import CartItem, CartSummary, CatalogProduct
from cart_pricing.core.decimal_value import Amount
from cart_pricing.core.pricing_constants import (
    FREE_SHIPPING_THRESHOLD,
    STANDARD_SHIPPING_COST,
    TAX_RATE,
)

logger = logging.getLogger(__name__)


def select_cart_items(
    is_authenticated: bool,
    server_items: Sequence[CartItem] | None,
    guest_items: Sequence[CartItem],
) -> list[CartItem]:
    """Pick the single authoritative item source for the current auth state."""
    if is_authenticated:
        return [CartItem(i.product_id, i.quantity) for i in server_items or ()]
    return [CartItem(i.product_id, i.quantity) for i in guest_items]


def _discounted_or_original(product: CatalogProduct) -> Decimal:
    if product.discounted_price is not None:
        return product.discounted_price
    return product.price


def _is_discounted(product: CatalogProduct) -> bool:
    return (
        product.discounted_price is not None
        and currency.is_less_than(product.discounted_price, product.price)
    )


def build_cart_summary(
    items: Sequence[CartItem],
    products: Mapping[str, CatalogProduct],
    *,
    tax_rate: Decimal = TAX_RATE,
    threshold: Amount = FREE_SHIPPING_THRESHOLD,
    shipping_cost: Amount = STANDARD_SHIPPING_COST,
) -> CartSummary:
    """Aggregate original and discounted totals for the given items."""
    if not items:
        return CartSummary.empty()

    divisor = currency.add(Decimal(1), tax_rate)
    original_subtotal = Decimal(0)
    discounted_subtotal = Decimal(0)
    has_discounts = False
    item_count = 0
    missing: list[str] = []

    for item in items:
        product = products.get(item.product_id)
        if product is None:
            missing.append(item.product_id)
            continue

        original_unit = currency.divide(product.price, divisor)
        discounted_unit = currency.divide(_discounted_or_original(product), divisor)
        original_subtotal = currency.add(
            original_subtotal, currency.multiply(original_unit, item.quantity),
        )
        discounted_subtotal = currency.add(
            discounted_subtotal, currency.multiply(discounted_unit, item.quantity),
        )
        item_count += item.quantity
        if _is_discounted(product):
            has_discounts = True

    if missing:
        logger.warning(
            f"Cart summary excludes {len(missing)} product(s) without catalog data",
            extra={"product_id": ",".join(missing), "item_count": len(items)},
        )

    tax = currency.multiply(discounted_subtotal, tax_rate)
    price_total = currency.add(discounted_subtotal, tax)
    shipping = currency.calculate_shipping(price_total, threshold, shipping_cost)
    original_total = currency.add(
        original_subtotal, currency.multiply(original_subtotal, tax_rate),
    )

    return CartSummary(
        subtotal=discounted_subtotal,
        tax=tax,
        shipping=shipping,
        total=currency.add(price_total, shipping),
        item_count=item_count,
        price_total=price_total,
        has_discounts=has_discounts,
        original_total=original_total,
        total_savings=currency.subtract(original_total, price_total),
        missing_product_ids=tuple(missing),
    )


# ─── Per-product helpers ─────────────────────────────────────────

def has_promotion(products: Mapping[str, CatalogProduct], product_id: str) -> bool:
    product = products.get(product_id)
    return product is not None and _is_discounted(product)


def get_discounted_price(
    products: Mapping[str, CatalogProduct], product_id: str,
) -> Decimal | None:
    """Tax-inclusive discounted price, or None when the product has no active discount."""
    product = products.get(product_id)
    if product is not None and _is_discounted(product):
        return product.discounted_price
    return None


def get_original_price(
    products: Mapping[str, CatalogProduct], product_id: str,
) -> Decimal | None:
    product = products.get(product_id)
    return product.price if product is not None else None


def get_discounted_subtotal(
    products: Mapping[str, CatalogProduct],
    product_id: str,
    tax_rate: Decimal = TAX_RATE,
) -> Decimal | None:
    price = get_discounted_price(products, product_id)
    if price is None:
        return None
    return currency.divide(price, currency.add(Decimal(1), tax_rate))


def get_original_subtotal(
    products: Mapping[str, CatalogProduct],
    product_id: str,
    tax_rate: Decimal = TAX_RATE,
) -> Decimal | None:
    price = get_original_price(products, product_id)
    if price is None:
        return None
    return currency.divide(price, currency.add(Decimal(1), tax_rate))
