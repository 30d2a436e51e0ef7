"""Promotion Schemas - storefront promotion listings and discounted price previews.

Invariants:
    - Preview prices are tax-inclusive major units; responses use fixed 2-decimal strings
    - Every promotion listing carries its display label (discount_text)
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from cart_pricing.core.decimal_value import to_fixed
from cart_pricing.core.domain_types import DiscountType
from cart_pricing.core.promotions import DiscountPromotion, PromotionQuote, format_discount_text


class PromotionOut(BaseModel):
    id: str
    discount_type: DiscountType
    discount_value: Decimal
    start_date: datetime
    end_date: datetime
    product_ids: list[str]
    discount_text: str

    @classmethod
    def from_promotion(cls, promotion: DiscountPromotion) -> "PromotionOut":
        return cls(
            id=promotion.id,
            discount_type=promotion.discount_type,
            discount_value=promotion.discount_value,
            start_date=promotion.start_date,
            end_date=promotion.end_date,
            product_ids=sorted(promotion.product_ids),
            discount_text=format_discount_text(
                promotion.discount_type, promotion.discount_value,
            ),
        )


class PromotionQuoteLineIn(BaseModel):
    product_id: str = Field(min_length=1)
    unit_price: Decimal = Field(ge=0)


class PromotionQuoteRequest(BaseModel):
    items: list[PromotionQuoteLineIn] = Field(min_length=1)


class PromotionQuoteOut(BaseModel):
    product_id: str
    original_price: str
    discounted_price: str
    discount_amount: str
    has_discount: bool
    promotion_id: str | None = None
    discount_text: str | None = None

    @classmethod
    def from_quote(cls, quote: PromotionQuote) -> "PromotionQuoteOut":
        return cls(
            product_id=quote.product_id,
            original_price=to_fixed(quote.original_price),
            discounted_price=to_fixed(quote.discounted_price),
            discount_amount=to_fixed(quote.discount_amount),
            has_discount=quote.has_discount,
            promotion_id=quote.promotion.id if quote.promotion else None,
            discount_text=quote.discount_text,
        )


class PromotionQuoteResponse(BaseModel):
    items: list[PromotionQuoteOut]
    has_discounts: bool
