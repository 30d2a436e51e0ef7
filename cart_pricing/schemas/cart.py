"""Cart Schemas - request/response models for the cart summary and validation endpoints.

Invariants:
    - Quantities bounded by MIN/MAX_QUANTITY_PER_ITEM
    - Response amounts are fixed 2-decimal strings (rounded half-up at this boundary only)
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from cart_pricing.core import currency
from cart_pricing.core.cart_types import (
    AuthenticatedCartItem,
    CartSummary,
    CatalogProduct,
    GuestCartItem,
)
from cart_pricing.core.decimal_value import to_fixed
from cart_pricing.core.pricing_constants import (
    MAX_QUANTITY_PER_ITEM,
    MIN_QUANTITY_PER_ITEM,
)
from cart_pricing.schemas.pricing import PriceValidationItem, PriceValidationResponse


class CartLineIn(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=MIN_QUANTITY_PER_ITEM, le=MAX_QUANTITY_PER_ITEM)

    def to_guest_item(self) -> GuestCartItem:
        return GuestCartItem(self.product_id, self.quantity)


class AuthenticatedCartLineIn(CartLineIn):
    unit_price_cents: int = Field(ge=0)
    unit_tax_cents: int = Field(ge=0)
    unit_subtotal_cents: int = Field(ge=0)

    def to_authenticated_item(self) -> AuthenticatedCartItem:
        return AuthenticatedCartItem(
            product_id=self.product_id,
            quantity=self.quantity,
            unit_price_cents=self.unit_price_cents,
            unit_tax_cents=self.unit_tax_cents,
            unit_subtotal_cents=self.unit_subtotal_cents,
        )


class GuestProductIn(BaseModel):
    """Catalog entry supplied by the caller for guest pricing."""
    price: Decimal = Field(ge=0)
    tax: Decimal = Field(ge=0)
    subtotal: Decimal = Field(ge=0)
    discounted_price: Decimal | None = Field(None, ge=0)

    def to_catalog_product(self) -> CatalogProduct:
        return CatalogProduct(
            price=self.price,
            tax=self.tax,
            subtotal=self.subtotal,
            discounted_price=self.discounted_price,
        )


class AuthenticatedSummaryRequest(BaseModel):
    items: list[AuthenticatedCartLineIn]


class GuestSummaryRequest(BaseModel):
    items: list[CartLineIn]
    products: dict[str, GuestProductIn] = Field(default_factory=dict)


class CartSummaryRequest(BaseModel):
    items: list[CartLineIn]


class CartSummaryResponse(BaseModel):
    subtotal: str
    tax: str
    shipping: str
    total: str
    price_total: str
    item_count: int
    has_discounts: bool = False
    original_total: str | None = None
    total_savings: str | None = None
    shipping_remaining: str
    formatted_total: str
    missing_product_ids: list[str] = Field(default_factory=list)

    @classmethod
    def from_summary(
        cls,
        summary: CartSummary,
        *,
        threshold: Decimal,
        currency_symbol: str,
    ) -> "CartSummaryResponse":
        def fixed(value: Decimal | None) -> str | None:
            return to_fixed(value) if value is not None else None

        return cls(
            subtotal=to_fixed(summary.subtotal),
            tax=to_fixed(summary.tax),
            shipping=to_fixed(summary.shipping),
            total=to_fixed(summary.total),
            price_total=to_fixed(summary.price_total),
            item_count=summary.item_count,
            has_discounts=summary.has_discounts,
            original_total=fixed(summary.original_total),
            total_savings=fixed(summary.total_savings),
            shipping_remaining=to_fixed(
                currency.calculate_shipping_remaining(summary.price_total, threshold),
            ),
            formatted_total=currency.format_amount(summary.total, currency_symbol),
            missing_product_ids=list(summary.missing_product_ids),
        )


class ValidatePricesRequest(BaseModel):
    items: list[PriceValidationItem]


class ValidatePricesResponse(BaseModel):
    """Validation verdict; checkout_allowed is False unless every line matched."""
    validation: PriceValidationResponse
    checkout_allowed: bool
    mismatched_product_ids: list[str] = Field(default_factory=list)
    message: str | None = None
