"""Currency Calculator - pure, stateless money operations for tax, shipping and summaries.

Invariants:
    - Every amount is a Decimal under MONEY_CONTEXT (decimal_value.py); no float math
    - calculate_tax(price) == price * tax_rate, applied to the tax-INCLUSIVE price
      (kept exactly as the storefront has always computed it; see DESIGN.md)
    - Shipping is 0 iff price_total >= threshold (boundary inclusive), else shipping_cost
    - total == price_total + shipping; item_count == sum of quantities, not line count
    - Guest lines whose product is missing from the catalog map are excluded from every
      total and reported in CartSummary.missing_product_ids

Design Decisions:
    - Module-level functions over a class of static methods: nothing to instantiate
    - Threshold/shipping/tax overrides are keyword arguments defaulting to pricing_constants,
      so settings can be injected by the service layer without core/ reading config
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal

from cart_pricing.core import decimal_value as dv
from cart_pricing.core.cart_types import (
    AuthenticatedCartItem,
    CartSummary,
    CatalogProduct,
    GuestCartItem,
    PricedItem,
)
from cart_pricing.core.decimal_value import Amount
from cart_pricing.core.pricing_constants import (
    DEFAULT_CURRENCY_SYMBOL,
    FREE_SHIPPING_THRESHOLD,
    STANDARD_SHIPPING_COST,
    TAX_RATE,
)

logger = logging.getLogger(__name__)


# ─── Conversions ─────────────────────────────────────────────────

def cents_to_decimal(cents: int) -> Decimal:
    """Convert integer cents to Decimal euros."""
    return dv.from_cents(cents)


def decimal_to_cents(amount: Decimal) -> int:
    """Convert Decimal euros to integer cents (half-up)."""
    return dv.to_cents(amount)


def number_to_decimal(euros: Amount) -> Decimal:
    """Convert a major-unit number or numeric string to Decimal."""
    return dv.to_decimal(euros)


# ─── Arithmetic ──────────────────────────────────────────────────

def multiply(price: Decimal, quantity: Amount) -> Decimal:
    """Multiply a price by a quantity or factor without intermediate rounding."""
    if isinstance(quantity, int) and not isinstance(quantity, bool):
        return dv.multiply_by_int(price, quantity)
    return dv.multiply(price, dv.to_decimal(quantity))


def add(a: Decimal, b: Decimal) -> Decimal:
    return dv.add(a, b)


def subtract(a: Decimal, b: Decimal) -> Decimal:
    return dv.subtract(a, b)


def divide(a: Decimal, b: Decimal) -> Decimal:
    return dv.divide(a, b)


def sum_amounts(values: Iterable[Decimal]) -> Decimal:
    """Sum Decimal values; exact, so independent of ordering."""
    total = dv.ZERO
    for value in values:
        total = dv.add(total, value)
    return total


def calculate_line_total(price: Decimal, quantity: int) -> Decimal:
    """Line total: price * quantity."""
    return multiply(price, quantity)


# ─── Tax & Shipping ──────────────────────────────────────────────

def calculate_tax(price_including_tax: Decimal, tax_rate: Decimal = TAX_RATE) -> Decimal:
    """Tax amount taken as price * rate from a tax-inclusive price."""
    return dv.multiply(price_including_tax, tax_rate)


def calculate_subtotal(price_including_tax: Decimal, tax_rate: Decimal = TAX_RATE) -> Decimal:
    """Tax-exclusive subtotal: price minus calculate_tax(price)."""
    return dv.subtract(price_including_tax, calculate_tax(price_including_tax, tax_rate))


def add_tax(subtotal: Decimal, tax_rate: Decimal = TAX_RATE) -> Decimal:
    """Tax-exclusive to tax-inclusive: subtotal * (1 + rate).

    Legacy alias kept for callers that still work from tax-exclusive prices;
    prefer calculate_tax for tax-inclusive prices.
    """
    return dv.multiply(subtotal, dv.add(Decimal(1), tax_rate))


def calculate_shipping(
    total: Decimal,
    threshold: Amount = FREE_SHIPPING_THRESHOLD,
    shipping_cost: Amount = STANDARD_SHIPPING_COST,
) -> Decimal:
    """Free shipping at or above the threshold, flat cost below it."""
    if dv.is_greater_or_equal(total, dv.to_decimal(threshold)):
        return Decimal(0)
    return dv.to_decimal(shipping_cost)


def calculate_shipping_remaining(
    current_total: Decimal, threshold: Amount = FREE_SHIPPING_THRESHOLD,
) -> Decimal:
    """Amount still needed for free shipping, 0 once the threshold is reached."""
    threshold_decimal = dv.to_decimal(threshold)
    if dv.is_less(current_total, threshold_decimal):
        return dv.subtract(threshold_decimal, current_total)
    return Decimal(0)


# ─── Formatting & Comparison ─────────────────────────────────────

def format_amount(amount: Decimal, currency: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Currency symbol followed by exactly two decimals (half-up at display time)."""
    return f"{currency}{dv.to_fixed(amount, 2)}"


def format_cents(cents: int, currency: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    return format_amount(dv.from_cents(cents), currency)


def is_equal(a: Decimal, b: Decimal) -> bool:
    return dv.is_equal(a, b)


def is_greater_than(a: Decimal, b: Decimal) -> bool:
    return dv.is_greater(a, b)


def is_greater_than_or_equal(a: Decimal, b: Decimal) -> bool:
    return dv.is_greater_or_equal(a, b)


def is_less_than(a: Decimal, b: Decimal) -> bool:
    return dv.is_less(a, b)


# ─── Summaries ───────────────────────────────────────────────────

def _item_count(items: Iterable[PricedItem | GuestCartItem | AuthenticatedCartItem]) -> int:
    return sum(item.quantity for item in items)


def _finish_summary(
    price_total: Decimal,
    subtotal: Decimal,
    tax: Decimal,
    item_count: int,
    threshold: Amount,
    shipping_cost: Amount,
    missing_product_ids: tuple[str, ...] = (),
) -> CartSummary:
    shipping = calculate_shipping(price_total, threshold, shipping_cost)
    return CartSummary(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=dv.add(price_total, shipping),
        item_count=item_count,
        price_total=price_total,
        missing_product_ids=missing_product_ids,
    )


def calculate_order_summary(
    items: Sequence[PricedItem],
    *,
    tax_rate: Decimal = TAX_RATE,
    threshold: Amount = FREE_SHIPPING_THRESHOLD,
    shipping_cost: Amount = STANDARD_SHIPPING_COST,
) -> CartSummary:
    """Summary from tax-inclusive unit prices; tax and subtotal derived from the total."""
    price_total = sum_amounts(
        calculate_line_total(item.price, item.quantity) for item in items
    )
    return _finish_summary(
        price_total=price_total,
        subtotal=calculate_subtotal(price_total, tax_rate),
        tax=calculate_tax(price_total, tax_rate),
        item_count=_item_count(items),
        threshold=threshold,
        shipping_cost=shipping_cost,
    )


def calculate_guest_cart_summary(
    items: Sequence[GuestCartItem],
    products: Mapping[str, CatalogProduct],
    *,
    threshold: Amount = FREE_SHIPPING_THRESHOLD,
    shipping_cost: Amount = STANDARD_SHIPPING_COST,
) -> CartSummary:
    """Summary for a guest cart priced from a catalog map carrying server tax/subtotal."""
    priced: list[tuple[CatalogProduct, int]] = []
    missing: list[str] = []
    for item in items:
        product = products.get(item.product_id)
        if product is None:
            missing.append(item.product_id)
            continue
        priced.append((product, item.quantity))

    if missing:
        logger.warning(
            f"Guest cart references {len(missing)} product(s) missing from catalog",
            extra={"product_id": ",".join(missing), "item_count": len(items)},
        )

    return _finish_summary(
        price_total=sum_amounts(multiply(p.price, qty) for p, qty in priced),
        subtotal=sum_amounts(multiply(p.subtotal, qty) for p, qty in priced),
        tax=sum_amounts(multiply(p.tax, qty) for p, qty in priced),
        item_count=sum(qty for _, qty in priced),
        threshold=threshold,
        shipping_cost=shipping_cost,
        missing_product_ids=tuple(missing),
    )


def calculate_authenticated_cart_summary(
    items: Sequence[AuthenticatedCartItem],
    *,
    threshold: Amount = FREE_SHIPPING_THRESHOLD,
    shipping_cost: Amount = STANDARD_SHIPPING_COST,
) -> CartSummary:
    """Summary for a server-priced cart: cents converted first, then multiplied and summed."""
    return _finish_summary(
        price_total=sum_amounts(
            multiply(cents_to_decimal(i.unit_price_cents), i.quantity) for i in items
        ),
        subtotal=sum_amounts(
            multiply(cents_to_decimal(i.unit_subtotal_cents), i.quantity) for i in items
        ),
        tax=sum_amounts(
            multiply(cents_to_decimal(i.unit_tax_cents), i.quantity) for i in items
        ),
        item_count=_item_count(items),
        threshold=threshold,
        shipping_cost=shipping_cost,
    )
