"""Pricing Authority Schemas - wire contract for validate-price, catalog and promotions.

Invariants:
    - Requests carry integer cents only; quantity >= 1, expected_unit_price_cents >= 0
    - Catalog prices are tax-inclusive major units parsed straight into Decimal
    - Unknown response fields are ignored (the authority may add fields)

Design Decisions:
    - Field names match the authority's snake_case JSON, so no aliasing is needed
    - Catalog payloads missing tax/subtotal derive them with core/currency.py
    - Promotion dates without an offset are read as UTC
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from cart_pricing.core import currency
from cart_pricing.core.cart_types import CatalogProduct
from cart_pricing.core.domain_types import DiscountType
from cart_pricing.core.promotions import DiscountPromotion, as_utc


class PriceValidationItem(BaseModel):
    """One cart line with the unit price the client expects to pay."""
    model_config = ConfigDict(frozen=True)

    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    expected_unit_price_cents: int = Field(ge=0)


class PriceValidationRequest(BaseModel):
    """POST /promotions/validate-price body."""
    items: list[PriceValidationItem] = Field(min_length=1)


class ValidatedPriceItem(BaseModel):
    product_id: str
    quantity: int
    original_unit_price_cents: int
    discounted_unit_price_cents: int
    discount_amount_cents: int
    unit_tax_cents: int
    unit_subtotal_cents: int
    applied_promotion_id: str | None = None
    is_price_valid: bool


class PriceValidationResponse(BaseModel):
    """Authoritative per-item prices and totals for one item set."""
    is_valid: bool
    items: list[ValidatedPriceItem] = Field(default_factory=list)
    total_original_price_cents: int = 0
    total_discounted_price_cents: int = 0
    total_discount_amount_cents: int = 0
    total_tax_cents: int = 0
    total_subtotal_cents: int = 0

    @property
    def has_discounts(self) -> bool:
        return self.total_discount_amount_cents > 0

    @property
    def discounted_items(self) -> list[ValidatedPriceItem]:
        return [i for i in self.items if i.applied_promotion_id is not None]


class CatalogProductPayload(BaseModel):
    """GET /products/{id} payload (tax-inclusive major units)."""
    id: str | None = None
    name: str | None = None
    price: Decimal = Field(ge=0)
    tax: Decimal | None = None
    subtotal: Decimal | None = None
    discounted_price: Decimal | None = Field(None, ge=0)

    def to_catalog_product(self) -> CatalogProduct:
        tax = self.tax if self.tax is not None else currency.calculate_tax(self.price)
        subtotal = (
            self.subtotal if self.subtotal is not None
            else currency.calculate_subtotal(self.price)
        )
        return CatalogProduct(
            price=self.price,
            tax=tax,
            subtotal=subtotal,
            discounted_price=self.discounted_price,
            name=self.name,
        )


class DiscountPromotionPayload(BaseModel):
    """Promotion with the products it applies to."""
    id: str
    discount_type: DiscountType
    discount_value: Decimal = Field(ge=0)
    start_date: datetime
    end_date: datetime
    product_ids: list[str] = Field(default_factory=list)

    def to_promotion(self) -> DiscountPromotion:
        return DiscountPromotion(
            id=self.id,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            start_date=as_utc(self.start_date),
            end_date=as_utc(self.end_date),
            product_ids=frozenset(self.product_ids),
        )
