"""Checkout orchestration: price, resolve coupon, create order, verify payment."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional
from uuid import uuid4

from ..catalog import BillingCadence, Segment, resolve_plan_id
from ..contracts import (
    ContractContext,
    ContractDisplay,
    ContractDraft,
    ContractService,
    EnterpriseContext,
    OneTimeContext,
    PricingSnapshot,
    StarterProContext,
    ThankYouContract,
)
from ..offers import OfferEngine
from ..pricing import (
    PricingQuote,
    enterprise_plan_id,
    is_domestic,
    normalize_package,
    price_enterprise,
    price_one_time,
    price_starter_pro,
    starter_pro_plan_id,
)
from ..pricing.tables import CONSULTATION_PACKAGE, DOMESTIC_COUNTRY
from .gateway import GatewayError, GatewayOrder, InvalidGatewaySignature, PaymentGateway
from .models import CheckoutResult, Customer, PaymentVerification, PricedSelection, VerifiedPayment
from .notifier import PaymentWebhookNotifier

logger = logging.getLogger("checkout")

WEBHOOK_SOURCE = "CHECKOUT-RAZORPAY"


class CheckoutError(ValueError):
    """Raised when a priced selection cannot be turned into an order."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _effective_cadence(billing_cadence: Optional[str]) -> str:
    value = str(billing_cadence or "").strip().lower()
    if value == BillingCadence.YEARLY.value:
        return BillingCadence.YEARLY.value
    return BillingCadence.MONTHLY.value


@dataclass
class CheckoutService:
    """Coordinates pricing, offers, the payment gateway and thank-you contracts."""

    gateway: PaymentGateway
    offers: OfferEngine
    contracts: ContractService
    notifier: PaymentWebhookNotifier
    currency: str = "INR"
    domestic_country: str = DOMESTIC_COUNTRY
    clock: Callable[[], datetime] = field(default=_utcnow)

    # Pricing ---------------------------------------------------------------

    def price_enterprise(
        self,
        *,
        package: str,
        billing_cadence: Optional[str],
        country: Optional[str],
        coupon_code: Optional[str] = None,
    ) -> PricedSelection:
        key = normalize_package(package)
        quote = price_enterprise(key, billing_cadence, country, domestic_country=self.domestic_country)
        cadence = BillingCadence.ONE_TIME.value if key == CONSULTATION_PACKAGE else _effective_cadence(billing_cadence)
        return self._select(
            segment=Segment.ENTERPRISE,
            plan_id=enterprise_plan_id(key),
            context=EnterpriseContext(package=key, billing_cadence=cadence),
            billing_type=cadence,
            country=country,
            quote=quote,
            domestic=is_domestic(country, self.domestic_country),
            coupon_code=coupon_code,
        )

    def price_starter_pro(
        self,
        *,
        plan: str,
        billing_cadence: Optional[str],
        country: Optional[str],
        coupon_code: Optional[str] = None,
    ) -> PricedSelection:
        plan_id = starter_pro_plan_id(plan)
        quote = price_starter_pro(plan_id, billing_cadence, country, domestic_country=self.domestic_country)
        cadence = _effective_cadence(billing_cadence)
        return self._select(
            segment=Segment.STARTER_PRO,
            plan_id=plan_id,
            context=StarterProContext(plan=plan_id, billing_cadence=cadence),
            billing_type=cadence,
            country=country,
            quote=quote,
            domestic=is_domestic(country, self.domestic_country),
            coupon_code=coupon_code,
        )

    def price_one_time(
        self,
        *,
        plan_id: str,
        custom_base: Optional[float] = None,
        coupon_code: Optional[str] = None,
        country: Optional[str] = None,
    ) -> PricedSelection:
        quote = price_one_time(plan_id, custom_base)
        canonical_id = resolve_plan_id(plan_id)
        return self._select(
            segment=Segment.ONE_TIME,
            plan_id=canonical_id,
            context=OneTimeContext(plan_id=canonical_id),
            billing_type=BillingCadence.ONE_TIME.value,
            country=country,
            quote=quote,
            # one-time plans are always taxed as domestic purchases
            domestic=True,
            coupon_code=coupon_code,
        )

    def _select(
        self,
        *,
        segment: Segment,
        plan_id: str,
        context: ContractContext,
        billing_type: str,
        country: Optional[str],
        quote: PricingQuote,
        domestic: bool,
        coupon_code: Optional[str],
    ) -> PricedSelection:
        offer = self.offers.resolve(plan_id, coupon_code, billing_type=billing_type, country=country)
        discount = self.offers.apply(quote.total, offer)
        return PricedSelection(
            segment=segment,
            plan_id=plan_id,
            context=context,
            billing_type=billing_type,
            country=country,
            quote=quote,
            offer=offer,
            discount=discount,
            is_domestic=domestic,
            coupon_code=(coupon_code or "").strip() or None,
        )

    # Orders ----------------------------------------------------------------

    def create_enterprise_order(
        self,
        *,
        package: str,
        billing_cadence: Optional[str],
        country: Optional[str],
        coupon_code: Optional[str] = None,
        customer: Optional[Customer] = None,
    ) -> CheckoutResult:
        selection = self.price_enterprise(
            package=package, billing_cadence=billing_cadence, country=country, coupon_code=coupon_code
        )
        return self._create_order(selection, customer)

    def create_starter_pro_order(
        self,
        *,
        plan: str,
        billing_cadence: Optional[str],
        country: Optional[str],
        coupon_code: Optional[str] = None,
        customer: Optional[Customer] = None,
    ) -> CheckoutResult:
        selection = self.price_starter_pro(
            plan=plan, billing_cadence=billing_cadence, country=country, coupon_code=coupon_code
        )
        return self._create_order(selection, customer)

    def create_one_time_order(
        self,
        *,
        plan_id: str,
        custom_base: Optional[float] = None,
        coupon_code: Optional[str] = None,
        country: Optional[str] = None,
        customer: Optional[Customer] = None,
    ) -> CheckoutResult:
        selection = self.price_one_time(
            plan_id=plan_id, custom_base=custom_base, coupon_code=coupon_code, country=country
        )
        return self._create_order(selection, customer)

    def _create_order(self, selection: PricedSelection, customer: Optional[Customer]) -> CheckoutResult:
        if selection.final <= 0:
            raise CheckoutError("Order total must be greater than zero after discounts")

        receipt = f"rcpt_{uuid4().hex[:24]}"
        notes = _selection_notes(selection, customer)
        order = self.gateway.create_order(
            amount=selection.final * 100,
            currency=self.currency,
            receipt=receipt,
            notes=notes,
        )
        logger.info(
            "Gateway order %s created segment=%s plan=%s final=%s coupon=%s",
            order.id,
            selection.segment.value,
            selection.plan_id,
            selection.final,
            selection.offer.code if selection.offer else None,
        )
        return CheckoutResult(
            order=order,
            pricing=selection.snapshot(self.currency),
            offer=selection.offer_outcome(),
            key_id=self.gateway.key_id,
        )

    # Verification ----------------------------------------------------------

    def verify_payment(
        self,
        *,
        order_id: str,
        payment_id: str,
        signature: str,
        fallback: Optional[ContractDraft] = None,
        customer: Optional[Customer] = None,
        meta: Optional[Mapping[str, Any]] = None,
    ) -> VerifiedPayment:
        """Verify a gateway callback, store the thank-you contract and sign its link.

        The webhook payload is returned rather than sent so that callers can
        deliver it after responding to the buyer.
        """

        if not self.gateway.verify_signature(order_id, payment_id, signature):
            logger.error("Invalid gateway signature order=%s payment=%s", order_id, payment_id)
            raise InvalidGatewaySignature("Invalid signature")

        payment_details: Dict[str, Any] = {}
        try:
            payment_details = self.gateway.fetch_payment(payment_id)
        except GatewayError:
            logger.exception("Unable to fetch payment %s from gateway", payment_id)

        order: Optional[GatewayOrder] = None
        try:
            order = self.gateway.fetch_order(order_id)
        except GatewayError:
            logger.exception("Unable to fetch order %s from gateway", order_id)

        draft = _draft_from_notes(order.notes, self.currency) if order else None
        if draft is None:
            draft = fallback

        redirect_url: Optional[str] = None
        if draft is not None:
            contract = ThankYouContract.from_draft(
                draft, order_id=order_id, payment_id=payment_id, created_at=self.clock()
            )
            redirect_url = self.contracts.issue(contract)
        else:
            logger.warning("No purchase details for order=%s, thank-you link not issued", order_id)

        logger.info("Payment verified order=%s payment=%s", order_id, payment_id)
        result = PaymentVerification(
            success=True,
            message="Payment verified successfully",
            redirect_url=redirect_url,
        )
        payload = self._webhook_payload(
            order_id=order_id,
            payment_id=payment_id,
            order=order,
            draft=draft,
            customer=customer,
            meta=meta,
            payment_details=payment_details,
        )
        return VerifiedPayment(result=result, webhook_payload=payload)

    def dispatch_webhook(self, payload: Mapping[str, Any]) -> None:
        self.notifier.notify(payload)

    def _webhook_payload(
        self,
        *,
        order_id: str,
        payment_id: str,
        order: Optional[GatewayOrder],
        draft: Optional[ContractDraft],
        customer: Optional[Customer],
        meta: Optional[Mapping[str, Any]],
        payment_details: Mapping[str, Any],
    ) -> Dict[str, Any]:
        if order is not None:
            amount: Optional[int] = order.amount
        elif draft is not None:
            amount = draft.pricing.final * 100
        else:
            amount = None
        return {
            "source": WEBHOOK_SOURCE,
            "verified": True,
            "razorpay_payment_id": payment_id,
            "razorpay_order_id": order_id,
            "amount": amount,
            "currency": order.currency if order else self.currency,
            "customer": customer.model_dump() if customer else {},
            "plan": draft.model_dump(mode="json", by_alias=True) if draft else {},
            "meta": dict(meta or {}),
            "payment_details": dict(payment_details),
            "verified_at": self.clock().isoformat(),
        }


def _selection_notes(selection: PricedSelection, customer: Optional[Customer]) -> Dict[str, str]:
    context = selection.context
    notes: Dict[str, Optional[str]] = {
        "segment": selection.segment.value,
        "plan_id": selection.plan_id,
        "package": getattr(context, "package", None),
        "plan": getattr(context, "plan", None),
        "billing_cadence": selection.billing_type,
        "country": selection.country,
        "coupon_code": selection.offer.code if selection.offer else None,
        "offer_label": selection.discount.description if selection.offer else None,
        "base": str(selection.quote.base),
        "tax": str(selection.quote.tax),
        "discount": str(selection.discount.discount),
        "final": str(selection.discount.final),
        "is_domestic": "true" if selection.is_domestic else "false",
    }
    if customer is not None:
        notes["customer_name"] = customer.name
        notes["customer_email"] = customer.email
        notes["customer_phone"] = customer.phone
    return {key: value for key, value in notes.items() if value}


def _draft_from_notes(notes: Mapping[str, str], currency: str) -> Optional[ContractDraft]:
    segment = notes.get("segment")
    try:
        if segment == Segment.ENTERPRISE.value:
            context = EnterpriseContext(package=notes["package"], billing_cadence=notes["billing_cadence"])
        elif segment == Segment.STARTER_PRO.value:
            context = StarterProContext(plan=notes["plan"], billing_cadence=notes["billing_cadence"])
        elif segment == Segment.ONE_TIME.value:
            context = OneTimeContext(plan_id=notes["plan_id"])
        else:
            return None
        pricing = PricingSnapshot(
            base=int(notes["base"]),
            tax=int(notes["tax"]),
            discount=int(notes.get("discount", "0")),
            final=int(notes["final"]),
            currency=currency,
            is_domestic=notes.get("is_domestic") == "true",
        )
    except (KeyError, ValueError):
        logger.warning("Order notes do not describe a purchase", extra={"order_segment": segment})
        return None
    return ContractDraft(
        context=context,
        pricing=pricing,
        display=ContractDisplay(coupon_code=notes.get("coupon_code"), offer_label=notes.get("offer_label")),
    )


__all__ = ["CheckoutError", "CheckoutService"]
