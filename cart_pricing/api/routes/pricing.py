"""Pricing Routes - server-side price validation before checkout.

Invariants:
    - checkout_allowed is True only for a fully matching, fail-closed verdict
    - A mismatch is a 200 response with is_valid=False (data, not an error)
    - Pricing authority failures surface as 503 (ValidationNetworkError)
    - Empty item lists are rejected with 400 before any network call
"""

from fastapi import APIRouter, Depends

from cart_pricing.api.dependencies import get_price_validation_service
from cart_pricing.core.validation_state import mismatch_message, mismatched_items
from cart_pricing.schemas.cart import ValidatePricesRequest, ValidatePricesResponse
from cart_pricing.services.price_validation import PriceValidationService

router = APIRouter(prefix="/api/v1/pricing", tags=["pricing"])


@router.post("/validate", response_model=ValidatePricesResponse)
async def validate_prices(
    body: ValidatePricesRequest,
    service: PriceValidationService = Depends(get_price_validation_service),
):
    response = await service.validate(body.items)
    message = mismatch_message(response)
    if message is None and not response.is_valid:
        # authority rejected the set without flagging a line (e.g. omitted products)
        message = "Price validation failed. Refresh your cart and try again."
    return ValidatePricesResponse(
        validation=response,
        checkout_allowed=response.is_valid,
        mismatched_product_ids=[item.product_id for item in mismatched_items(response)],
        message=message,
    )
