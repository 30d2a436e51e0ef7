"""Pricing Authority Client - wraps httpx.AsyncClient with error mapping and envelope unwrapping.

Invariants:
    - Transport errors, timeouts, non-2xx statuses and malformed bodies on validate-price
      all raise ValidationNetworkError; never a response that claims validity
    - Catalog failures raise CatalogLookupError for the single product involved
    - A 404 on the per-product promotion lookup means "no promotion" and returns None
    - No automatic retries: a retry is always a caller decision

Design Decisions:
    - Wrapper over raw client: isolates HTTP details from the validation service
    - Accepts both bare bodies and the authority's {"success": ..., "data": ...} envelope
    - Optional transport injection (httpx.MockTransport in tests)
"""

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from cart_pricing.core.boundary_protocols import ValidationItemLike
from cart_pricing.core.cart_types import CatalogProduct
from cart_pricing.core.errors import (
    CatalogLookupError,
    PricingError,
    ValidationNetworkError,
)
from cart_pricing.core.promotions import DiscountPromotion
from cart_pricing.schemas.pricing import (
    CatalogProductPayload,
    DiscountPromotionPayload,
    PriceValidationItem,
    PriceValidationRequest,
    PriceValidationResponse,
)

logger = logging.getLogger(__name__)

VALIDATE_PRICE_PATH = "/promotions/validate-price"

ErrorFactory = Callable[[str, int | None], PricingError]


def _unwrap_envelope(body: Any) -> Any:
    """Return the `data` member of an API envelope, or the body itself."""
    if isinstance(body, dict) and "success" in body and "data" in body:
        return body["data"]
    return body


def _envelope_error(body: Any) -> str | None:
    if isinstance(body, dict) and body.get("success") is False:
        error = body.get("error") or body.get("message") or "request rejected"
        return error if isinstance(error, str) else str(error)
    return None


class PricingAuthorityClient:
    """Async client for the pricing authority's validation, catalog and promotion endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def validate_prices(
        self, items: Sequence[ValidationItemLike],
    ) -> PriceValidationResponse:
        """POST the item list to validate-price and parse the authoritative verdict."""
        request = PriceValidationRequest(items=[
            PriceValidationItem(
                product_id=item.product_id,
                quantity=item.quantity,
                expected_unit_price_cents=item.expected_unit_price_cents,
            )
            for item in items
        ])

        def network_error(message: str, status: int | None) -> PricingError:
            return ValidationNetworkError(message, status_code=status)

        started = time.monotonic()
        body = await self._request_json(
            "POST", VALIDATE_PRICE_PATH, network_error,
            json=request.model_dump(mode="json"),
        )
        try:
            response = PriceValidationResponse.model_validate(body)
        except ValidationError as e:
            logger.error(f"Malformed validate-price response: {e}")
            raise ValidationNetworkError("malformed response from pricing authority")
        logger.info(
            "Price validation response received",
            extra={
                "item_count": len(request.items),
                "duration_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return response

    async def get_product(self, product_id: str) -> CatalogProduct:
        """GET /products/{id} as a CatalogProduct."""
        def lookup_error(message: str, status: int | None) -> PricingError:
            return CatalogLookupError(product_id, message, status_code=status)

        body = await self._request_json("GET", f"/products/{product_id}", lookup_error)
        try:
            return CatalogProductPayload.model_validate(body).to_catalog_product()
        except ValidationError as e:
            raise CatalogLookupError(product_id, f"malformed product payload: {e}")

    async def get_product_promotion(self, product_id: str) -> DiscountPromotion | None:
        """Best active promotion for one product; None when the authority has none."""
        def lookup_error(message: str, status: int | None) -> PricingError:
            return CatalogLookupError(product_id, message, status_code=status)

        response = await self._send("GET", f"/promotions/product/{product_id}", lookup_error)
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        body = self._parse_json(response, lookup_error)
        if body is None:
            return None
        return self._parse_promotions([body], lookup_error)[0]

    async def get_active_promotions(self) -> list[DiscountPromotion]:
        body = await self._request_json(
            "GET", "/promotions/active", self._promotions_error,
        )
        return self._parse_promotions(body, self._promotions_error)

    async def get_active_promotions_for_products(
        self, product_ids: Sequence[str],
    ) -> list[DiscountPromotion]:
        body = await self._request_json(
            "POST", "/promotions/products", self._promotions_error,
            json={"product_ids": list(product_ids)},
        )
        return self._parse_promotions(body, self._promotions_error)

    # ─── internals ───────────────────────────────────────────────

    @staticmethod
    def _promotions_error(message: str, status: int | None) -> PricingError:
        return ValidationNetworkError(f"promotions lookup failed: {message}", status_code=status)

    async def _request_json(
        self, method: str, path: str, error_factory: ErrorFactory, **kwargs: Any,
    ) -> Any:
        response = await self._send(method, path, error_factory, **kwargs)
        return self._parse_json(response, error_factory)

    async def _send(
        self, method: str, path: str, error_factory: ErrorFactory, **kwargs: Any,
    ) -> httpx.Response:
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException:
            logger.warning(f"Pricing authority timeout on {method} {path}", extra={"path": path})
            raise error_factory("request timed out", None)
        except httpx.HTTPError as e:
            logger.warning(
                f"Pricing authority transport error on {method} {path}: {e}",
                extra={"path": path},
            )
            raise error_factory(f"transport error: {e}", None)

    def _parse_json(self, response: httpx.Response, error_factory: ErrorFactory) -> Any:
        path = response.request.url.path
        if response.is_error:
            logger.warning(
                f"Pricing authority returned HTTP {response.status_code}",
                extra={"status_code": response.status_code, "path": path},
            )
            raise error_factory(f"HTTP {response.status_code}", response.status_code)
        try:
            body = response.json()
        except ValueError:
            raise error_factory("response body is not JSON", response.status_code)
        rejected = _envelope_error(body)
        if rejected is not None:
            raise error_factory(rejected, response.status_code)
        return _unwrap_envelope(body)

    @staticmethod
    def _parse_promotions(body: Any, error_factory: ErrorFactory) -> list[DiscountPromotion]:
        if not isinstance(body, list):
            raise error_factory("expected a list of promotions", None)
        try:
            return [
                DiscountPromotionPayload.model_validate(entry).to_promotion()
                for entry in body
            ]
        except ValidationError as e:
            raise error_factory(f"malformed promotion payload: {e}", None)

