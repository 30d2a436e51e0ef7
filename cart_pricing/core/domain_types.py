"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - ProductId wraps the pricing authority's string id; never compare raw dict keys
    - Cents is an integer in the minor currency unit
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity / Value Types ──────────────────────────────────────

ProductId = NewType("ProductId", str)
PromotionId = NewType("PromotionId", str)
Cents = NewType("Cents", int)


# ─── Enums ───────────────────────────────────────────────────────

class ValidationPhase(str, Enum):
    """Per-attempt price validation lifecycle."""
    IDLE = "idle"
    VALIDATING = "validating"
    VALID = "valid"
    INVALID = "invalid"
    FAILED = "failed"


class DiscountType(str, Enum):
    """Promotion discount kinds supported by the pricing authority."""
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
