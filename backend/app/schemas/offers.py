"""API schemas for offer preview and administration endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..checkout import OfferOutcome, PricedSelection
from ..contracts import PricingSnapshot
from ..offers import DiscountType, Offer


class EnterprisePreviewRequest(BaseModel):
    segment: Literal["enterprise"]
    package: str = Field(min_length=1)
    billing_cadence: str = Field(default="monthly", alias="billingCadence")
    country: str = Field(min_length=1)
    coupon_code: Optional[str] = Field(default=None, alias="couponCode")

    model_config = ConfigDict(populate_by_name=True)


class StarterProPreviewRequest(BaseModel):
    segment: Literal["starter_pro"]
    plan: str = Field(min_length=1)
    billing_cadence: str = Field(default="monthly", alias="billingCadence")
    country: str = Field(min_length=1)
    coupon_code: Optional[str] = Field(default=None, alias="couponCode")

    model_config = ConfigDict(populate_by_name=True)


class OneTimePreviewRequest(BaseModel):
    segment: Literal["one_time"]
    plan_id: str = Field(alias="planId", min_length=1)
    custom_base: Optional[float] = Field(default=None, alias="customBase")
    country: Optional[str] = None
    coupon_code: Optional[str] = Field(default=None, alias="couponCode")

    model_config = ConfigDict(populate_by_name=True)


OfferPreviewRequest = Union[EnterprisePreviewRequest, StarterProPreviewRequest, OneTimePreviewRequest]


class OfferPreviewResponse(BaseModel):
    plan_id: str = Field(alias="planId")
    pricing: PricingSnapshot
    offer: OfferOutcome

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_selection(cls, selection: PricedSelection, currency: str) -> "OfferPreviewResponse":
        return cls(
            plan_id=selection.plan_id,
            pricing=selection.snapshot(currency),
            offer=selection.offer_outcome(),
        )


class OfferAudiencePayload(BaseModel):
    plans: List[str] = Field(default_factory=list)
    billing_types: List[str] = Field(default_factory=list, alias="billingTypes")
    countries: List[str] = Field(default_factory=list)
    plan_cadences: Dict[str, List[str]] = Field(default_factory=dict, alias="planCadences")

    model_config = ConfigDict(populate_by_name=True)


class OfferValidityPayload(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)


class OfferCreateRequest(BaseModel):
    code: str = Field(min_length=1, max_length=64)
    discount_type: DiscountType = Field(alias="type")
    amount: float = Field(allow_inf_nan=False)
    active: bool = True
    applies_to: OfferAudiencePayload = Field(default_factory=OfferAudiencePayload, alias="appliesTo")
    usage_limit: Optional[int] = Field(default=None, alias="usageLimit")
    validity: OfferValidityPayload = Field(default_factory=OfferValidityPayload)

    model_config = ConfigDict(populate_by_name=True)


class OfferResponse(BaseModel):
    offer: Offer

    model_config = ConfigDict(populate_by_name=True)


class OfferListResponse(BaseModel):
    offers: List[Offer]

    model_config = ConfigDict(populate_by_name=True)
