"""API schemas for checkout endpoints."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..catalog import PlanDefinition
from ..checkout import CheckoutResult, Customer, GatewayOrder, OfferOutcome, PaymentVerification
from ..contracts import ContractDraft, PricingSnapshot


class CustomerPayload(BaseModel):
    name: Optional[str] = Field(default=None, max_length=200)
    email: Optional[str] = Field(default=None, max_length=320)
    phone: Optional[str] = Field(default=None, max_length=32)

    model_config = ConfigDict(populate_by_name=True)

    def to_customer(self) -> Customer:
        return Customer(name=self.name, email=self.email, phone=self.phone)


class EnterpriseCheckoutRequest(BaseModel):
    package: str = Field(min_length=1)
    billing_cadence: str = Field(default="monthly", alias="billingCadence")
    country: str = Field(min_length=1)
    coupon_code: Optional[str] = Field(default=None, alias="couponCode", max_length=64)
    customer: CustomerPayload = Field(default_factory=CustomerPayload)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("package", mode="before")
    @classmethod
    def _package_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class StarterProCheckoutRequest(BaseModel):
    plan: str = Field(min_length=1)
    billing_cadence: str = Field(default="monthly", alias="billingCadence")
    country: str = Field(min_length=1)
    coupon_code: Optional[str] = Field(default=None, alias="couponCode", max_length=64)
    customer: CustomerPayload = Field(default_factory=CustomerPayload)

    model_config = ConfigDict(populate_by_name=True)


class OneTimeCheckoutRequest(BaseModel):
    plan_id: str = Field(alias="planId", min_length=1)
    custom_base: Optional[float] = Field(default=None, alias="customBase")
    country: Optional[str] = None
    coupon_code: Optional[str] = Field(default=None, alias="couponCode", max_length=64)
    customer: CustomerPayload = Field(default_factory=CustomerPayload)

    model_config = ConfigDict(populate_by_name=True)


class CheckoutResponse(BaseModel):
    order: GatewayOrder
    pricing: PricingSnapshot
    offer: OfferOutcome
    key_id: Optional[str] = Field(default=None, alias="keyId")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: CheckoutResult) -> "CheckoutResponse":
        return cls(order=result.order, pricing=result.pricing, offer=result.offer, key_id=result.key_id)


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: str = Field(min_length=1)
    razorpay_payment_id: str = Field(min_length=1)
    razorpay_signature: str = Field(min_length=1)
    customer: CustomerPayload = Field(default_factory=CustomerPayload)
    purchase: Optional[ContractDraft] = None
    meta: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)


class VerifyPaymentResponse(BaseModel):
    success: bool
    message: str
    redirect_url: Optional[str] = Field(default=None, alias="redirectUrl")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_verification(cls, verification: PaymentVerification) -> "VerifyPaymentResponse":
        return cls(
            success=verification.success,
            message=verification.message,
            redirect_url=verification.redirect_url,
        )


class PlanResponse(BaseModel):
    id: str
    label: str
    tier: str
    kind: str
    segment: str
    cadences: List[str]
    consultation: bool
    sort_order: int = Field(alias="sortOrder")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_definition(cls, plan: PlanDefinition) -> "PlanResponse":
        return cls(
            id=plan.plan_id,
            label=plan.label,
            tier=plan.tier,
            kind=plan.kind.value,
            segment=plan.segment.value,
            cadences=[cadence.value for cadence in plan.cadences],
            consultation=plan.consultation,
            sort_order=plan.sort_order,
        )


class PlanListResponse(BaseModel):
    plans: List[PlanResponse]

    model_config = ConfigDict(populate_by_name=True)
