"""Promotion Service - tests for active filtering and discounted price previews.

Tests cover:
    - Expired or future promotions are never listed or applied
    - One bulk lookup per quote, for unique product ids
    - Lines without a promotion keep their original price
    - Lookup failures propagate
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from cart_pricing.core.domain_types import DiscountType
from cart_pricing.core.errors import ValidationNetworkError
from cart_pricing.services.promotion_service import PromotionService

from tests.services.fake_pricing import FakePromotionSource, promotion

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# ─── Lookups ───────────────────────────────────────────────────

async def test_product_promotion_returns_running_promotion():
    service = PromotionService(FakePromotionSource([promotion("promo-1", products=("p1",))]))
    found = await service.product_promotion("p1", NOW)
    assert found.id == "promo-1"


async def test_product_promotion_none_when_absent():
    service = PromotionService(FakePromotionSource())
    assert await service.product_promotion("p1", NOW) is None


async def test_expired_product_promotion_is_hidden():
    expired = promotion("old", end=NOW - timedelta(days=1))
    service = PromotionService(FakePromotionSource([expired]))
    assert await service.product_promotion("p1", NOW) is None


async def test_active_promotions_filters_by_window():
    running = promotion("running")
    upcoming = promotion("upcoming", start=NOW + timedelta(days=7))
    service = PromotionService(FakePromotionSource([running, upcoming]))
    assert [p.id for p in await service.active_promotions(NOW)] == ["running"]


async def test_naive_now_is_accepted():
    service = PromotionService(FakePromotionSource([promotion("running")]))
    assert len(await service.active_promotions(datetime(2026, 3, 1, 12, 0))) == 1


# ─── Quotes ────────────────────────────────────────────────────

async def test_quote_uses_one_lookup_for_unique_ids():
    source = FakePromotionSource([promotion("promo-1", value="50", products=("p1",))])
    service = PromotionService(source)

    quotes = await service.quote(
        [("p1", Decimal("24.20")), ("p2", Decimal("60.50")), ("p1", Decimal("24.20"))], NOW,
    )

    assert source.requested == [["p1", "p2"]]
    assert [q.discounted_price for q in quotes] == [
        Decimal("12.10"), Decimal("60.50"), Decimal("12.10"),
    ]
    assert quotes[0].discount_text == "50% korting"
    assert not quotes[1].has_discount


async def test_quote_picks_largest_discount():
    source = FakePromotionSource([
        promotion("ten", value="10"),
        promotion("five", discount_type=DiscountType.FIXED_AMOUNT, value="5"),
    ])
    [quote] = await PromotionService(source).quote([("p1", Decimal("100"))], NOW)
    assert quote.promotion.id == "ten"
    assert quote.discount_amount == Decimal("10")


async def test_quote_ignores_expired_promotions():
    source = FakePromotionSource([promotion("old", value="50", end=NOW - timedelta(seconds=1))])
    [quote] = await PromotionService(source).quote([("p1", Decimal("10"))], NOW)
    assert quote.discounted_price == Decimal("10")
    assert quote.promotion is None


async def test_empty_quote_makes_no_call():
    source = FakePromotionSource()
    assert await PromotionService(source).quote([], NOW) == []
    assert source.requested == []


async def test_lookup_failure_propagates():
    source = FakePromotionSource()
    source.fail_with = ValidationNetworkError("promotions lookup failed: HTTP 500")
    with pytest.raises(ValidationNetworkError):
        await PromotionService(source).quote([("p1", Decimal("10"))], NOW)
