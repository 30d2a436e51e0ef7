"""Cart Summary Service - catalog fetches feeding the pure aggregator."""

from decimal import Decimal

import pytest

from cart_pricing.core.cart_types import CartItem, CartSummary
from cart_pricing.services.cart_summary_service import CartSummaryService

from tests.services.fake_pricing import FakeCatalog, catalog_product


async def test_summary_from_fetched_products():
    catalog = FakeCatalog({
        "p1": catalog_product("24.20", discounted="12.10"),
        "p2": catalog_product("60.50"),
    })
    service = CartSummaryService(catalog)

    summary = await service.summarize([CartItem("p1", 2), CartItem("p2", 1)])

    assert summary.price_total == Decimal("84.70")
    assert summary.total_savings == Decimal("24.20")
    assert summary.has_discounts


async def test_each_product_fetched_once():
    catalog = FakeCatalog({"p1": catalog_product("12.10")})
    service = CartSummaryService(catalog)

    await service.summarize([CartItem("p1", 1), CartItem("p1", 2)])

    assert catalog.requested == ["p1"]


async def test_failed_lookup_is_omitted_and_reported():
    catalog = FakeCatalog({"p1": catalog_product("12.10")})
    service = CartSummaryService(catalog)

    summary = await service.summarize([CartItem("p1", 1), CartItem("gone", 3)])

    assert summary.item_count == 1
    assert summary.missing_product_ids == ("gone",)


async def test_empty_cart_makes_no_lookups():
    catalog = FakeCatalog({})
    summary = await CartSummaryService(catalog).summarize([])
    assert summary == CartSummary.empty()
    assert catalog.requested == []


async def test_unexpected_lookup_error_propagates():
    class BrokenCatalog:
        async def get_product(self, product_id):
            raise RuntimeError("catalog exploded")

    with pytest.raises(RuntimeError):
        await CartSummaryService(BrokenCatalog()).summarize([CartItem("p1", 1)])


async def test_settings_overrides_are_applied():
    catalog = FakeCatalog({"p1": catalog_product("109")})
    service = CartSummaryService(
        catalog,
        tax_rate=Decimal("0.09"),
        threshold=Decimal("500"),
        shipping_cost=Decimal("3.95"),
    )
    summary = await service.summarize([CartItem("p1", 1)])
    assert summary.tax == Decimal("9")
    assert summary.shipping == Decimal("3.95")
