"""Domain models for checkout orchestration."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..catalog import Segment
from ..contracts import ContractContext, ContractDisplay, ContractDraft, PricingSnapshot
from ..offers import DiscountResult, Offer
from ..pricing import PricingQuote
from .gateway import GatewayOrder


class Customer(BaseModel):
    """Buyer details passed through to the gateway and the webhook."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class OfferOutcome(BaseModel):
    applied: bool
    code: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(frozen=True)


@dataclass(frozen=True)
class PricedSelection:
    """A plan selection after pricing and coupon resolution."""

    segment: Segment
    plan_id: str
    context: ContractContext
    billing_type: str
    country: Optional[str]
    quote: PricingQuote
    offer: Optional[Offer]
    discount: DiscountResult
    is_domestic: bool
    coupon_code: Optional[str] = None

    @property
    def final(self) -> int:
        return self.discount.final

    def snapshot(self, currency: str) -> PricingSnapshot:
        return PricingSnapshot(
            base=self.quote.base,
            tax=self.quote.tax,
            discount=self.discount.discount,
            final=self.discount.final,
            currency=currency,
            is_domestic=self.is_domestic,
        )

    def offer_outcome(self) -> OfferOutcome:
        if self.offer is None:
            return OfferOutcome(applied=False, code=self.coupon_code or None)
        return OfferOutcome(applied=True, code=self.offer.code, description=self.discount.description)

    def draft(self, currency: str) -> ContractDraft:
        return ContractDraft(
            context=self.context,
            pricing=self.snapshot(currency),
            display=ContractDisplay(
                coupon_code=self.offer.code if self.offer else None,
                offer_label=self.discount.description if self.offer else None,
            ),
        )


class CheckoutResult(BaseModel):
    """Gateway order plus the pricing breakdown shown to the buyer."""

    order: GatewayOrder
    pricing: PricingSnapshot
    offer: OfferOutcome
    key_id: Optional[str] = Field(default=None, alias="keyId")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PaymentVerification(BaseModel):
    success: bool
    message: str
    redirect_url: Optional[str] = Field(default=None, alias="redirectUrl")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


@dataclass(frozen=True)
class VerifiedPayment:
    """Result of a payment verification and the webhook payload it produced."""

    result: PaymentVerification
    webhook_payload: Dict[str, Any]
