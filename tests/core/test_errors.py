"""Error Hierarchy - tests for codes, HTTP statuses and the REST envelope."""

from cart_pricing.core.errors import (
    CatalogLookupError,
    ErrorCategory,
    ErrorContext,
    InputError,
    InvalidAmountError,
    PriceMismatchError,
    PricingError,
    ValidationNetworkError,
)


def test_all_errors_share_base():
    for error in (
        InvalidAmountError("x"),
        InputError("empty"),
        PriceMismatchError(["p1"]),
        ValidationNetworkError("down"),
        CatalogLookupError("p1", "HTTP 404"),
    ):
        assert isinstance(error, PricingError)


def test_http_statuses():
    assert InvalidAmountError("x").http_status == 400
    assert InputError("empty").http_status == 400
    assert PriceMismatchError(["p1"]).http_status == 409
    assert ValidationNetworkError("down").http_status == 503
    assert CatalogLookupError("p1", "HTTP 404").http_status == 502


def test_mismatch_and_network_error_are_distinguishable():
    mismatch = PriceMismatchError(["p1", "p2"])
    network = ValidationNetworkError("down")
    assert mismatch.category is ErrorCategory.PRICE_MISMATCH
    assert network.category is ErrorCategory.EXTERNAL_API
    assert mismatch.message == "Price validation failed for 2 item(s)"


def test_mismatch_response_lists_products():
    body = PriceMismatchError(["p1"]).to_response()
    assert body["error"]["code"] == "PRICE_MISMATCH"
    assert body["error"]["mismatched_product_ids"] == ["p1"]


def test_user_message_overrides_message_in_response():
    error = InputError("internal detail", context=ErrorContext(user_message="Try again"))
    assert error.to_response()["error"]["message"] == "Try again"


def test_catalog_error_carries_product_id():
    error = CatalogLookupError("p7", "timeout")
    assert error.to_response()["error"]["context"]["product_id"] == "p7"


def test_catalog_lookup_does_not_mutate_caller_context():
    shared = ErrorContext(content_key='["p1"]', user_message="Refresh your cart")
    error = CatalogLookupError("p9", "HTTP 500", status_code=500, context=shared)
    assert shared.product_id is None
    assert error.context.product_id == "p9"
    assert error.context.content_key == '["p1"]'
    assert error.context is not shared
