"""Decimal Value - the single arbitrary-precision number type used for money.

Invariants:
    - Every arithmetic operation runs under MONEY_CONTEXT (28 digits, ROUND_HALF_UP)
    - No operation rounds to cents; only to_fixed() and to_cents() quantize (half-up)
    - Construction from malformed input raises InvalidAmountError, never returns zero
    - Values are decimal.Decimal (immutable); every operation returns a new value

Design Decisions:
    - stdlib decimal.Decimal with an explicit Context object instead of mutating the
      thread-local default context: callers elsewhere in the process are unaffected
    - Floats convert through repr(): 0.21 becomes Decimal("0.21"), not its binary expansion
"""

from decimal import (
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
)
from typing import Union

from cart_pricing.core.errors import InvalidAmountError

MONEY_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP)

ZERO = Decimal(0)
_HUNDRED = Decimal(100)
_ONE_UNIT = Decimal(1)

Amount = Union[Decimal, int, float, str]


def to_decimal(value: Amount) -> Decimal:
    """Construct a finite Decimal from a Decimal, int, float or numeric string."""
    if isinstance(value, bool):
        raise InvalidAmountError(value)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = _parse(repr(value))
    elif isinstance(value, str):
        result = _parse(value.strip())
    else:
        raise InvalidAmountError(value)
    if not result.is_finite():
        raise InvalidAmountError(value)
    return result


def _parse(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation:
        raise InvalidAmountError(text) from None


def add(a: Decimal, b: Decimal) -> Decimal:
    return MONEY_CONTEXT.add(a, b)


def subtract(a: Decimal, b: Decimal) -> Decimal:
    return MONEY_CONTEXT.subtract(a, b)


def multiply(a: Decimal, b: Decimal) -> Decimal:
    return MONEY_CONTEXT.multiply(a, b)


def multiply_by_int(a: Decimal, factor: int) -> Decimal:
    """Multiply by an integer count (quantities)."""
    if isinstance(factor, bool) or not isinstance(factor, int):
        raise InvalidAmountError(factor)
    return MONEY_CONTEXT.multiply(a, Decimal(factor))


def divide(a: Decimal, b: Decimal) -> Decimal:
    """Divide at full context precision; division by zero is an invalid amount."""
    try:
        return MONEY_CONTEXT.divide(a, b)
    except (DivisionByZero, InvalidOperation):
        raise InvalidAmountError(b) from None


def is_equal(a: Decimal, b: Decimal) -> bool:
    return a.compare(b) == 0


def is_greater(a: Decimal, b: Decimal) -> bool:
    return a.compare(b) > 0


def is_greater_or_equal(a: Decimal, b: Decimal) -> bool:
    return a.compare(b) >= 0


def is_less(a: Decimal, b: Decimal) -> bool:
    return a.compare(b) < 0


def to_fixed(value: Decimal, places: int = 2) -> str:
    """Format with exactly `places` decimals, rounding half-up at this boundary only."""
    exponent = _ONE_UNIT.scaleb(-places)
    quantized = value.quantize(exponent, rounding=ROUND_HALF_UP, context=MONEY_CONTEXT)
    return f"{quantized:f}"


def from_cents(cents: int) -> Decimal:
    """Integer minor units to a major-unit Decimal (1299 -> 12.99)."""
    if isinstance(cents, bool) or not isinstance(cents, int):
        raise InvalidAmountError(cents)
    return MONEY_CONTEXT.divide(Decimal(cents), _HUNDRED)


def to_cents(value: Decimal) -> int:
    """Major-unit Decimal to integer minor units, half-up on the third decimal."""
    scaled = MONEY_CONTEXT.multiply(value, _HUNDRED)
    return int(scaled.quantize(_ONE_UNIT, rounding=ROUND_HALF_UP, context=MONEY_CONTEXT))
