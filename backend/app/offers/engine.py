"""Coupon resolution and discount computation."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Optional, Sequence

from ..catalog import resolve_plan_id
from ..pricing import round_half_up
from .models import DiscountResult, DiscountType, Offer, normalize_code
from .repository import OfferRepository, OfferStoreError

logger = logging.getLogger(__name__)


def _format_amount(amount: float) -> str:
    value = Decimal(str(amount))
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def describe_offer(offer: Offer, currency_symbol: str = "₹") -> str:
    amount = _format_amount(offer.amount)
    if offer.discount_type == DiscountType.PERCENT:
        return f"{amount}% off via {offer.code}"
    return f"{currency_symbol}{amount} off via {offer.code}"


def apply_offer(total: int, offer: Offer, *, currency_symbol: str = "₹") -> DiscountResult:
    """Apply ``offer`` to ``total``; the discount is clamped to ``[0, total]``."""

    if offer.discount_type == DiscountType.PERCENT:
        raw_discount = round_half_up(Decimal(total) * Decimal(str(offer.amount)) / 100)
    else:
        raw_discount = round_half_up(offer.amount)
    discount = min(max(raw_discount, 0), max(total, 0))
    return DiscountResult(
        discount=discount,
        final=total - discount,
        description=describe_offer(offer, currency_symbol),
    )


def _matches(values: Sequence[str], candidate: Optional[str]) -> bool:
    if not values or candidate is None:
        return True
    return candidate.strip().lower() in {value.lower() for value in values}


class OfferEngine:
    """Matches coupon codes against the stored offers.

    A code that does not resolve is an expected outcome, never an error:
    :meth:`resolve` returns ``None`` for every kind of mismatch.
    """

    def __init__(
        self,
        repository: OfferRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        enforce_audience: bool = False,
        currency_symbol: str = "₹",
    ) -> None:
        self._repository = repository
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._enforce_audience = enforce_audience
        self._currency_symbol = currency_symbol

    def resolve(
        self,
        plan_id: str,
        coupon_code: Optional[str],
        *,
        billing_type: Optional[str] = None,
        country: Optional[str] = None,
    ) -> Optional[Offer]:
        code = normalize_code(coupon_code)
        if not code:
            return None

        try:
            offers = self._repository.list_offers()
        except OfferStoreError:
            logger.exception("Offer store unavailable, coupon %s not applied", code)
            return None
        if not offers:
            return None

        offer = next((candidate for candidate in offers if normalize_code(candidate.code) == code), None)
        if offer is None:
            logger.info("Coupon %s not found", code)
            return None
        if not offer.active:
            logger.info("Coupon %s is inactive", code)
            return None
        if not offer.validity.contains(self._clock()):
            logger.info("Coupon %s outside its validity window", code)
            return None
        canonical_plan = resolve_plan_id(plan_id)
        if offer.applies_to.plans and canonical_plan not in offer.applies_to.plans:
            logger.info("Coupon %s does not apply to plan %s", code, plan_id)
            return None
        if not offer.applies_to.allows_cadence(canonical_plan, billing_type):
            logger.info("Coupon %s does not apply to plan %s billed %s", code, plan_id, billing_type)
            return None
        if self._enforce_audience and not self._audience_matches(offer, billing_type, country):
            logger.info("Coupon %s does not apply to billing=%s country=%s", code, billing_type, country)
            return None

        if offer.is_exhausted:
            logger.warning(
                "Coupon %s resolved with usage at limit used=%s limit=%s",
                code,
                offer.used,
                offer.usage_limit,
            )
        return offer

    def apply(self, total: int, offer: Optional[Offer]) -> DiscountResult:
        if offer is None:
            return DiscountResult.not_applied(total)
        return apply_offer(total, offer, currency_symbol=self._currency_symbol)

    @staticmethod
    def _audience_matches(offer: Offer, billing_type: Optional[str], country: Optional[str]) -> bool:
        return _matches(offer.applies_to.billing_types, billing_type) and _matches(
            offer.applies_to.countries, country
        )


__all__ = ["OfferEngine", "apply_offer", "describe_offer"]
