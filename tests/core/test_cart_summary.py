"""Cart Summary Aggregator - tests for discount-aware summaries and product helpers.

Tests cover:
    - Single item source chosen by authentication state
    - Per-unit subtotal = price / (1 + rate); tax on the discounted subtotal
    - Shipping from the discounted price_total, savings from original_total
    - Zero discounted prices honored; missing products excluded and reported

Prices are multiples of 1.21 so every per-unit subtotal is exact.
"""

from decimal import Decimal

from cart_pricing.core.cart_summary import (
    build_cart_summary,
    get_discounted_price,
    get_discounted_subtotal,
    get_original_price,
    get_original_subtotal,
    has_promotion,
    select_cart_items,
)
from cart_pricing.core.cart_types import (
    AuthenticatedCartItem,
    CartItem,
    CartSummary,
    CatalogProduct,
    GuestCartItem,
)


def _product(price: str, discounted: str | None = None) -> CatalogProduct:
    price_d = Decimal(price)
    return CatalogProduct(
        price=price_d,
        tax=price_d * Decimal("0.21"),
        subtotal=price_d * Decimal("0.79"),
        discounted_price=Decimal(discounted) if discounted is not None else None,
    )


# ─── Source selection ──────────────────────────────────────────

def test_authenticated_uses_server_items_only():
    server = [AuthenticatedCartItem("s1", 2, unit_price_cents=100)]
    guest = [GuestCartItem("g1", 1)]
    assert select_cart_items(True, server, guest) == [CartItem("s1", 2)]


def test_guest_uses_local_items_only():
    server = [AuthenticatedCartItem("s1", 2)]
    guest = [GuestCartItem("g1", 1)]
    assert select_cart_items(False, server, guest) == [CartItem("g1", 1)]


def test_authenticated_without_server_cart_is_empty():
    assert select_cart_items(True, None, [GuestCartItem("g1", 1)]) == []


# ─── build_cart_summary ────────────────────────────────────────

def test_empty_items_give_zero_summary():
    assert build_cart_summary([], {"p1": _product("12.10")}) == CartSummary.empty()


def test_mixed_discounted_and_regular_items():
    products = {
        "p1": _product("24.20", discounted="12.10"),
        "p2": _product("60.50"),
    }
    summary = build_cart_summary([CartItem("p1", 2), CartItem("p2", 1)], products)

    assert summary.subtotal == Decimal("70")
    assert summary.tax == Decimal("14.70")
    assert summary.price_total == Decimal("84.70")
    assert summary.shipping == Decimal(0)
    assert summary.total == Decimal("84.70")
    assert summary.item_count == 3
    assert summary.original_total == Decimal("108.90")
    assert summary.total_savings == Decimal("24.20")
    assert summary.has_discounts


def test_shipping_uses_discounted_total():
    products = {"p1": _product("96.80", discounted="60.50")}
    summary = build_cart_summary([CartItem("p1", 1)], products)

    assert summary.original_total == Decimal("96.80")
    assert summary.price_total == Decimal("60.50")
    assert summary.shipping == Decimal("7.5")
    assert summary.total == Decimal("68.00")


def test_no_discounts():
    summary = build_cart_summary([CartItem("p1", 1)], {"p1": _product("12.10")})
    assert not summary.has_discounts
    assert summary.total_savings == Decimal(0)
    assert summary.price_total == Decimal("12.10")
    assert summary.total == Decimal("19.60")


def test_discounted_price_equal_to_price_is_not_a_discount():
    products = {"p1": _product("12.10", discounted="12.10")}
    assert not build_cart_summary([CartItem("p1", 1)], products).has_discounts


def test_zero_discounted_price_is_honored():
    products = {"p1": _product("12.10", discounted="0")}
    summary = build_cart_summary([CartItem("p1", 1)], products)
    assert summary.price_total == Decimal(0)
    assert summary.total_savings == Decimal("12.10")
    assert summary.has_discounts


def test_custom_rates():
    products = {"p1": _product("109")}
    summary = build_cart_summary(
        [CartItem("p1", 1)], products,
        tax_rate=Decimal("0.09"), threshold=Decimal("200"), shipping_cost=Decimal("5"),
    )
    assert summary.subtotal == Decimal("100")
    assert summary.tax == Decimal("9")
    assert summary.shipping == Decimal("5")


def test_missing_products_are_excluded_and_reported():
    products = {"p1": _product("12.10")}
    summary = build_cart_summary([CartItem("p1", 1), CartItem("gone", 2)], products)
    assert summary.item_count == 1
    assert summary.price_total == Decimal("12.10")
    assert summary.missing_product_ids == ("gone",)


# ─── Per-product helpers ───────────────────────────────────────

def test_product_helpers_for_discounted_product():
    products = {"p1": _product("24.20", discounted="12.10")}
    assert has_promotion(products, "p1")
    assert get_discounted_price(products, "p1") == Decimal("12.10")
    assert get_original_price(products, "p1") == Decimal("24.20")
    assert get_discounted_subtotal(products, "p1") == Decimal("10")
    assert get_original_subtotal(products, "p1") == Decimal("20")


def test_product_helpers_without_discount():
    products = {"p1": _product("24.20")}
    assert not has_promotion(products, "p1")
    assert get_discounted_price(products, "p1") is None
    assert get_discounted_subtotal(products, "p1") is None
    assert get_original_price(products, "p1") == Decimal("24.20")


def test_product_helpers_for_unknown_product():
    assert not has_promotion({}, "nope")
    assert get_original_price({}, "nope") is None
    assert get_original_subtotal({}, "nope") is None
