"""Price Validation Service - submits expected line prices to the pricing authority.

Invariants:
    - Per attempt: IDLE -> VALIDATING -> {VALID, INVALID, FAILED}
    - Empty or malformed item lists raise InputError before any network call
    - is_valid is recomputed client-side: the authority's flag AND every item's
      is_price_valid AND every requested product present in the response
    - Transport/server failures and malformed verdicts raise ValidationNetworkError
      (never a "valid" result)
    - No automatic retry; callers re-invoke validate() for a manual retry

Design Decisions:
    - Mismatches are returned as data (is_valid=False); only the checkout gate
      (core/validation_state.ensure_checkout_allowed) turns them into an exception
"""

import logging
from collections.abc import Sequence

from pydantic import ValidationError

from cart_pricing.core.boundary_protocols import PriceValidator, ValidationItemLike
from cart_pricing.core.domain_types import ValidationPhase
from cart_pricing.core.errors import ErrorContext, InputError, PricingError, ValidationNetworkError
from cart_pricing.core.validation_state import build_content_key, mismatched_items
from cart_pricing.schemas.pricing import PriceValidationResponse

logger = logging.getLogger(__name__)


def check_items(items: Sequence[ValidationItemLike]) -> None:
    """Raise InputError unless every line is a well-formed validation item."""
    if not items:
        raise InputError("At least one item is required for price validation")
    for item in items:
        if not item.product_id:
            raise InputError("Every item needs a product_id")
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity < 1:
            raise InputError(
                "All item quantities must be greater than 0",
                context=ErrorContext(product_id=item.product_id),
            )
        price = item.expected_unit_price_cents
        if isinstance(price, bool) or not isinstance(price, int) or price < 0:
            raise InputError(
                "Expected unit price must be a non-negative integer amount of cents",
                context=ErrorContext(product_id=item.product_id),
            )


def reconcile_validity(
    items: Sequence[ValidationItemLike], response: PriceValidationResponse,
) -> PriceValidationResponse:
    """Return the response with is_valid recomputed fail-closed against the request."""
    returned = {item.product_id for item in response.items}
    missing = [item.product_id for item in items if item.product_id not in returned]
    is_valid = (
        response.is_valid
        and all(item.is_price_valid for item in response.items)
        and not missing
    )
    if missing:
        logger.warning(
            f"Pricing authority omitted {len(missing)} requested product(s)",
            extra={"product_id": ",".join(missing)},
        )
    if is_valid == response.is_valid:
        return response
    return response.model_copy(update={"is_valid": is_valid})


class PriceValidationService:
    """Validates cart lines against the pricing authority, one attempt at a time."""

    def __init__(self, validator: PriceValidator):
        self.validator = validator
        self.phase = ValidationPhase.IDLE

    async def validate(
        self, items: Sequence[ValidationItemLike],
    ) -> PriceValidationResponse:
        check_items(items)
        content_key = build_content_key(items)
        self.phase = ValidationPhase.VALIDATING
        try:
            raw = await self.validator.validate_prices(items)
        except PricingError:
            self.phase = ValidationPhase.FAILED
            raise
        except Exception as e:
            self.phase = ValidationPhase.FAILED
            logger.error(f"Unexpected price validation error: {e}", exc_info=True)
            raise ValidationNetworkError(
                f"unexpected {type(e).__name__}",
                context=ErrorContext(content_key=content_key),
            ) from e

        try:
            response = raw if isinstance(raw, PriceValidationResponse) else (
                PriceValidationResponse.model_validate(raw, from_attributes=True)
            )
        except ValidationError as e:
            self.phase = ValidationPhase.FAILED
            logger.error(
                f"Malformed price validation response: {e.error_count()} error(s)",
                extra={"content_key": content_key, "item_count": len(items)},
            )
            raise ValidationNetworkError(
                "malformed response from pricing authority",
                context=ErrorContext(content_key=content_key),
            ) from e
        response = reconcile_validity(items, response)
        self.phase = ValidationPhase.VALID if response.is_valid else ValidationPhase.INVALID

        if not response.is_valid:
            logger.warning(
                f"Price mismatch on {len(mismatched_items(response))} item(s)",
                extra={"content_key": content_key, "item_count": len(items)},
            )
        return response
