"""Thank-you contract models."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import CONTRACT_VERSION


class ContractKind(str, Enum):
    """Checkout segment that produced the contract."""

    ENTERPRISE = "enterprise"
    STARTER_PRO = "starter_pro"
    ONE_TIME = "one_time"


class EnterpriseContext(BaseModel):
    kind: Literal["enterprise"] = "enterprise"
    package: str
    billing_cadence: str = Field(alias="billingCadence")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class StarterProContext(BaseModel):
    kind: Literal["starter_pro"] = "starter_pro"
    plan: str
    billing_cadence: str = Field(alias="billingCadence")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class OneTimeContext(BaseModel):
    kind: Literal["one_time"] = "one_time"
    plan_id: str = Field(alias="planId")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


ContractContext = Annotated[
    Union[EnterpriseContext, StarterProContext, OneTimeContext],
    Field(discriminator="kind"),
]


class PricingSnapshot(BaseModel):
    """Amounts shown on the confirmation page."""

    base: int = Field(ge=0)
    tax: int = Field(ge=0)
    discount: int = Field(default=0, ge=0)
    final: int = Field(ge=0)
    currency: str
    is_domestic: bool = Field(alias="isDomestic")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ContractIds(BaseModel):
    order_id: str = Field(alias="orderId")
    payment_id: str = Field(alias="paymentId")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ContractDisplay(BaseModel):
    coupon_code: Optional[str] = Field(default=None, alias="couponCode")
    offer_label: Optional[str] = Field(default=None, alias="offerLabel")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ContractDraft(BaseModel):
    """Purchase details known before the payment ids are attached."""

    context: ContractContext
    pricing: PricingSnapshot
    display: ContractDisplay = Field(default_factory=ContractDisplay)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ThankYouContract(BaseModel):
    """Immutable summary of a verified purchase, redeemable via a signed link."""

    version: Literal["v1"] = CONTRACT_VERSION
    kind: ContractKind
    context: ContractContext
    pricing: PricingSnapshot
    ids: ContractIds
    display: ContractDisplay = Field(default_factory=ContractDisplay)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_validator(mode="after")
    def _kind_matches_context(self) -> "ThankYouContract":
        if self.kind.value != self.context.kind:
            raise ValueError("kind must match context.kind")
        return self

    @classmethod
    def from_draft(
        cls,
        draft: ContractDraft,
        *,
        order_id: str,
        payment_id: str,
        created_at: Optional[datetime] = None,
    ) -> "ThankYouContract":
        return cls(
            kind=ContractKind(draft.context.kind),
            context=draft.context,
            pricing=draft.pricing,
            ids=ContractIds(order_id=order_id, payment_id=payment_id),
            display=draft.display,
            created_at=created_at or datetime.now(timezone.utc),
        )
