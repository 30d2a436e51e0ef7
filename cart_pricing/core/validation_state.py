"""Validation State - content keys, UI-facing validation snapshot, and the checkout gate.

Invariants:
    - build_content_key depends only on (product_id, quantity, expected_unit_price_cents),
      sorted by product_id: list order and object identity never change the key
    - A snapshot is valid only if its response was computed for the CURRENT item key
    - A failed attempt (network error) never reports is_valid=True
    - ensure_checkout_allowed is fail-closed: anything but a current, valid response raises

Design Decisions:
    - Frozen dataclass snapshots replaced wholesale (dataclasses.replace) by the coordinator,
      so a snapshot handed to the UI never changes underneath it
    - Network failure and price mismatch raise different errors so callers can tell them apart
"""

import json
from collections.abc import Sequence
from dataclasses import dataclass

from cart_pricing.core.boundary_protocols import (
    ValidatedItemLike,
    ValidationItemLike,
    ValidationResponseLike,
)
from cart_pricing.core.domain_types import ValidationPhase
from cart_pricing.core.errors import (
    ErrorContext,
    InputError,
    PriceMismatchError,
    ValidationNetworkError,
)

EMPTY_CONTENT_KEY = "[]"


def build_content_key(items: Sequence[ValidationItemLike]) -> str:
    """Canonical serialization of an item list for equality checks and de-duplication."""
    entries = sorted(
        (
            {
                "id": item.product_id,
                "qty": item.quantity,
                "price": item.expected_unit_price_cents,
            }
            for item in items
        ),
        key=lambda entry: (entry["id"], entry["qty"], entry["price"]),
    )
    return json.dumps(entries, separators=(",", ":"), ensure_ascii=False)


def mismatched_items(response: ValidationResponseLike) -> list[ValidatedItemLike]:
    return [item for item in response.items if not item.is_price_valid]


def mismatch_message(response: ValidationResponseLike) -> str | None:
    """User-facing message for a mismatching response, None when nothing mismatched."""
    invalid = mismatched_items(response)
    if not invalid:
        return None
    return (
        f"Price validation failed for {len(invalid)} item(s). "
        "Refresh your cart to get the latest prices and try again."
    )


@dataclass(frozen=True)
class ValidationState:
    """Snapshot of price validation exposed to the UI layer."""
    phase: ValidationPhase = ValidationPhase.IDLE
    validation_response: ValidationResponseLike | None = None
    validation_error: str | None = None
    items_key: str = EMPTY_CONTENT_KEY
    response_key: str | None = None

    @property
    def is_validating(self) -> bool:
        return self.phase is ValidationPhase.VALIDATING

    @property
    def is_stale(self) -> bool:
        """Response exists but belongs to a different item set than the current one."""
        return (
            self.validation_response is not None
            and self.response_key != self.items_key
        )

    @property
    def is_valid(self) -> bool:
        return (
            self.validation_response is not None
            and self.validation_error is None
            and not self.is_stale
            and self.validation_response.is_valid
        )

    @property
    def checkout_allowed(self) -> bool:
        return self.is_valid and not self.is_validating


def ensure_checkout_allowed(state: ValidationState) -> ValidationResponseLike:
    """Return the current valid response or raise why checkout must be blocked."""
    context = ErrorContext(content_key=state.items_key)
    if state.validation_error is not None:
        raise ValidationNetworkError(
            "last attempt did not complete",
            context=ErrorContext(
                content_key=state.items_key, user_message=state.validation_error,
            ),
        )
    response = state.validation_response
    if response is None or state.is_stale or state.is_validating:
        raise InputError(
            "Cart prices have not been validated for the current items",
            context=context,
        )
    if not response.is_valid:
        raise PriceMismatchError(
            [item.product_id for item in mismatched_items(response)],
            context=context,
        )
    return response
