"""API test fixtures - FastAPI app over ASGITransport with a fake pricing authority.

Invariants:
    - get_pricing_client overridden per test; the lifespan (real httpx client) never runs
    - Overrides cleared after each test
"""

from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from cart_pricing.api.dependencies import get_pricing_client
from cart_pricing.main import app

from tests.services.fake_pricing import (
    FakeCatalog,
    FakePriceValidator,
    FakePromotionSource,
    catalog_product,
    promotion,
)

STOREFRONT_SALE = promotion(
    "sale-1",
    value="50",
    products=("p1",),
    start=datetime(2020, 1, 1, tzinfo=timezone.utc),
    end=datetime(2100, 1, 1, tzinfo=timezone.utc),
)


class FakeAuthority(FakePriceValidator):
    """Validation, catalog and promotion lookups in one object, like PricingAuthorityClient."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.catalog = FakeCatalog({
            "p1": catalog_product("24.20", discounted="12.10"),
            "p2": catalog_product("60.50"),
        })
        self.promotion_source = FakePromotionSource([STOREFRONT_SALE])

    async def get_product(self, product_id):
        return await self.catalog.get_product(product_id)

    async def get_product_promotion(self, product_id):
        return await self.promotion_source.get_product_promotion(product_id)

    async def get_active_promotions(self):
        return await self.promotion_source.get_active_promotions()

    async def get_active_promotions_for_products(self, product_ids):
        return await self.promotion_source.get_active_promotions_for_products(product_ids)


@pytest.fixture
def authority():
    return FakeAuthority()


@pytest.fixture
async def client(authority):
    app.dependency_overrides[get_pricing_client] = lambda: authority
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
