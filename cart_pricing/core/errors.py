"""Error Hierarchy - typed, categorized exceptions for every pricing failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Input errors (400-level) are recoverable; transport errors (500-level) block checkout
    - A price mismatch is data (is_valid=False) until the checkout boundary raises PriceMismatchError
    - to_response() produces the REST envelope; no internal details leaked in messages

Design Decisions:
    - Single hierarchy with PricingError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability context without coupling to logging
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    PRICE_MISMATCH = "price_mismatch"
    EXTERNAL_API = "external_api"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    content_key: str | None = None
    product_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class PricingError(Exception):
    """Base exception for all cart pricing errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "content_key": self.context.content_key,
                    "product_id": self.context.product_id,
                },
            }
        }


# ─── Input Errors (400-level) ───────────────────────────────────

class InvalidAmountError(PricingError):
    """A monetary value could not be parsed as a finite decimal."""
    def __init__(self, value: Any, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid monetary amount: {value!r}",
            "INVALID_AMOUNT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.value = value


class InputError(PricingError):
    """Empty or malformed item list passed to validation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INPUT_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class PriceMismatchError(PricingError):
    """Server-computed prices differ from the client-expected prices."""
    def __init__(
        self, mismatched_product_ids: list[str], context: ErrorContext | None = None,
    ):
        count = len(mismatched_product_ids)
        super().__init__(
            f"Price validation failed for {count} item(s)" if count
            else "Price validation failed",
            "PRICE_MISMATCH", ErrorCategory.PRICE_MISMATCH,
            ErrorSeverity.WARNING, context, 409,
        )
        self.mismatched_product_ids = mismatched_product_ids

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["mismatched_product_ids"] = self.mismatched_product_ids
        return response


# ─── Transport Errors (500-level) ───────────────────────────────

class ValidationNetworkError(PricingError):
    """Transport or server failure while talking to the pricing authority."""
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Price validation request failed: {message}",
            "VALIDATION_NETWORK_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.status_code = status_code


class CatalogLookupError(PricingError):
    """Product catalog lookup failed for a single product."""
    def __init__(
        self,
        product_id: str,
        message: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = (
            replace(context, product_id=product_id) if context is not None
            else ErrorContext(product_id=product_id)
        )
        super().__init__(
            f"Catalog lookup for product '{product_id}' failed: {message}",
            "CATALOG_LOOKUP_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, ctx, 502,
        )
        self.status_code = status_code
