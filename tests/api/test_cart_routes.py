"""Cart Summary Routes - HTTP tests for the three summary endpoints and health."""


async def test_health(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_authenticated_summary(client):
    response = await client.post("/api/v1/cart/summary/authenticated", json={"items": [
        {"product_id": "p1", "quantity": 2, "unit_price_cents": 1299,
         "unit_tax_cents": 273, "unit_subtotal_cents": 1026},
        {"product_id": "p2", "quantity": 1, "unit_price_cents": 750,
         "unit_tax_cents": 158, "unit_subtotal_cents": 592},
    ]})
    assert response.status_code == 200
    body = response.json()
    assert body["price_total"] == "33.48"
    assert body["subtotal"] == "26.44"
    assert body["tax"] == "7.04"
    assert body["shipping"] == "7.50"
    assert body["total"] == "40.98"
    assert body["item_count"] == 3
    assert body["shipping_remaining"] == "41.52"
    assert body["formatted_total"] == "€40.98"


async def test_guest_summary_reports_missing_products(client):
    response = await client.post("/api/v1/cart/summary/guest", json={
        "items": [
            {"product_id": "p1", "quantity": 6},
            {"product_id": "unknown", "quantity": 1},
        ],
        "products": {
            "p1": {"price": "15.00", "tax": "2.60", "subtotal": "12.40"},
        },
    })
    assert response.status_code == 200
    body = response.json()
    assert body["price_total"] == "90.00"
    assert body["shipping"] == "0.00"
    assert body["total"] == "90.00"
    assert body["item_count"] == 6
    assert body["missing_product_ids"] == ["unknown"]


async def test_catalog_summary_applies_discounts(client):
    response = await client.post("/api/v1/cart/summary", json={"items": [
        {"product_id": "p1", "quantity": 2},
        {"product_id": "p2", "quantity": 1},
    ]})
    assert response.status_code == 200
    body = response.json()
    assert body["price_total"] == "84.70"
    assert body["original_total"] == "108.90"
    assert body["total_savings"] == "24.20"
    assert body["has_discounts"] is True
    assert body["shipping"] == "0.00"


async def test_quantity_out_of_range_is_validation_error(client):
    response = await client.post("/api/v1/cart/summary", json={"items": [
        {"product_id": "p1", "quantity": 0},
    ]})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"].endswith("quantity")


async def test_unhandled_error_returns_generic_500(client, authority):
    async def explode(product_id):
        raise RuntimeError("catalog exploded")

    authority.catalog.get_product = explode
    response = await client.post("/api/v1/cart/summary", json={"items": [
        {"product_id": "p1", "quantity": 1},
    ]})
    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert "exploded" not in error["message"]
