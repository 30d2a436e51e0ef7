"""Pricing Routes - HTTP tests for fail-closed price validation."""

from cart_pricing.core.errors import ValidationNetworkError

ITEMS = [
    {"product_id": "p1", "quantity": 2, "expected_unit_price_cents": 1299},
    {"product_id": "p2", "quantity": 1, "expected_unit_price_cents": 750},
]


async def test_matching_prices_allow_checkout(client, authority):
    response = await client.post("/api/v1/pricing/validate", json={"items": ITEMS})
    assert response.status_code == 200
    body = response.json()
    assert body["checkout_allowed"] is True
    assert body["validation"]["is_valid"] is True
    assert body["mismatched_product_ids"] == []
    assert body["message"] is None
    assert len(authority.calls) == 1


async def test_mismatch_is_reported_as_data(client, authority):
    authority.mismatch = {"p2"}
    response = await client.post("/api/v1/pricing/validate", json={"items": ITEMS})
    assert response.status_code == 200
    body = response.json()
    assert body["checkout_allowed"] is False
    assert body["mismatched_product_ids"] == ["p2"]
    assert body["message"].startswith("Price validation failed for 1 item(s)")


async def test_network_failure_is_503(client, authority):
    authority.fail_with = ValidationNetworkError("request timed out")
    response = await client.post("/api/v1/pricing/validate", json={"items": ITEMS})
    assert response.status_code == 503
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_NETWORK_ERROR"
    assert error["category"] == "external_api"


async def test_empty_items_rejected_without_call(client, authority):
    response = await client.post("/api/v1/pricing/validate", json={"items": []})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INPUT_ERROR"
    assert authority.calls == []


async def test_negative_price_is_validation_error(client):
    response = await client.post("/api/v1/pricing/validate", json={"items": [
        {"product_id": "p1", "quantity": 1, "expected_unit_price_cents": -5},
    ]})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_unexpected_error_does_not_leak_details(client, authority):
    authority.fail_with = RuntimeError("secret stack detail")
    response = await client.post("/api/v1/pricing/validate", json={"items": ITEMS})
    assert response.status_code == 503
    assert "secret" not in response.json()["error"]["message"]
