"""Pricing Constants - tax, shipping and validation defaults shared by core/ functions.

Invariants:
    - Monetary constants are Decimal, never float
    - Settings (config.py) may override these at the service/API layer; core/ never reads settings
"""

from decimal import Decimal

# 21% BTW (VAT), Netherlands
TAX_RATE = Decimal("0.21")

FREE_SHIPPING_THRESHOLD = Decimal("75")
STANDARD_SHIPPING_COST = Decimal("7.5")

DEFAULT_CURRENCY = "EUR"
DEFAULT_CURRENCY_SYMBOL = "€"

MIN_QUANTITY_PER_ITEM = 1
MAX_QUANTITY_PER_ITEM = 99

PRICE_VALIDATION_DEBOUNCE_MS = 1500
