"""Cart Types - plain dataclasses passed between the cart sources and the calculators.

Invariants:
    - Amounts are Decimal (major units) or int cents (fields suffixed _cents); never float
    - CartSummary is frozen: every recomputation produces a new summary
    - CartSummary.item_count counts units (sum of quantities), not lines
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CartItem:
    """A cart line as provided by either cart source: product reference and quantity."""
    product_id: str
    quantity: int


@dataclass(frozen=True)
class GuestCartItem(CartItem):
    """Client-persisted cart line, priced later from a catalog lookup."""


@dataclass(frozen=True)
class AuthenticatedCartItem(CartItem):
    """Server-priced cart line; unit amounts are integer cents."""
    unit_price_cents: int = 0
    unit_tax_cents: int = 0
    unit_subtotal_cents: int = 0


@dataclass(frozen=True)
class PricedItem:
    """Tax-inclusive unit price and quantity for an order summary."""
    price: Decimal
    quantity: int


@dataclass(frozen=True)
class CatalogProduct:
    """Catalog entry in tax-inclusive major units, as served by the product catalog."""
    price: Decimal
    tax: Decimal
    subtotal: Decimal
    discounted_price: Decimal | None = None
    name: str | None = None


@dataclass(frozen=True)
class CartSummary:
    """Displayable cart totals."""
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    item_count: int
    price_total: Decimal
    has_discounts: bool = False
    original_total: Decimal | None = None
    total_savings: Decimal | None = None
    missing_product_ids: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> "CartSummary":
        zero = Decimal(0)
        return cls(
            subtotal=zero, tax=zero, shipping=zero, total=zero,
            item_count=0, price_total=zero,
            has_discounts=False, original_total=zero, total_savings=zero,
        )
