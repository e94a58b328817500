"""Administrative operations on coupon offers."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

from ..catalog import BillingCadence, resolve_plan_id
from .models import DiscountType, Offer, OfferApplicability, OfferValidity, normalize_code
from .repository import OfferRepository

logger = logging.getLogger(__name__)


class OfferValidationError(ValueError):
    """Raised when an offer definition is rejected at write time."""


class OfferNotFound(LookupError):
    """Raised when an admin operation targets an unknown code."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _resolve_plan_cadences(
    plan_cadences: Mapping[str, Sequence[str]], plan_ids: Tuple[str, ...]
) -> Dict[str, Tuple[str, ...]]:
    known = {cadence.value for cadence in BillingCadence}
    resolved: Dict[str, Tuple[str, ...]] = {}
    for plan, values in plan_cadences.items():
        plan_id = resolve_plan_id(plan)
        if plan_id not in plan_ids:
            raise OfferValidationError(f"appliesTo.planCadences names unlisted plan {plan}")
        allowed = tuple(dict.fromkeys(value.strip().lower() for value in values if value and value.strip()))
        unknown = [value for value in allowed if value not in known]
        if unknown:
            raise OfferValidationError(f"Unknown billing cadence {unknown[0]}")
        if allowed:
            resolved[plan_id] = allowed
    return resolved


@dataclass
class OfferAdminService:
    """Creates, toggles and deletes offers on behalf of administrators."""

    repository: OfferRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    def list_offers(self) -> Sequence[Offer]:
        return sorted(self.repository.list_offers(), key=lambda offer: offer.code)

    def create_offer(
        self,
        *,
        code: str,
        discount_type: DiscountType,
        amount: float,
        plans: Sequence[str],
        billing_types: Sequence[str] = (),
        countries: Sequence[str] = (),
        plan_cadences: Optional[Mapping[str, Sequence[str]]] = None,
        usage_limit: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        active: bool = True,
    ) -> Offer:
        normalized_code = normalize_code(code)
        if not normalized_code:
            raise OfferValidationError("code is required")
        if amount is None or not math.isfinite(amount) or amount <= 0:
            raise OfferValidationError("amount must be greater than zero")
        plan_ids = tuple(dict.fromkeys(resolve_plan_id(plan) for plan in plans if plan and plan.strip()))
        if not plan_ids:
            raise OfferValidationError("appliesTo.plans must list at least one plan")
        cadences = _resolve_plan_cadences(plan_cadences or {}, plan_ids)
        if usage_limit is not None and usage_limit < 1:
            raise OfferValidationError("usageLimit must be a positive integer")
        validity = OfferValidity(start=start, end=end)
        if validity.start and validity.end and validity.end < validity.start:
            raise OfferValidationError("validity end must not precede start")

        now = self.clock()
        existing = next(
            (offer for offer in self.repository.list_offers() if offer.code == normalized_code),
            None,
        )
        offer = Offer(
            code=normalized_code,
            discount_type=DiscountType(discount_type),
            amount=amount,
            active=active,
            applies_to=OfferApplicability(
                plans=plan_ids,
                billing_types=tuple(billing_types),
                countries=tuple(countries),
                plan_cadences=cadences,
            ),
            usage_limit=usage_limit,
            used=existing.used if existing else 0,
            validity=validity,
            created_at=existing.created_at if existing and existing.created_at else now,
            updated_at=now,
        )
        stored = self.repository.upsert_offer(offer)
        logger.info("Offer %s saved type=%s amount=%s", stored.code, stored.discount_type.value, stored.amount)
        return stored

    def set_active(self, code: str, active: bool) -> Offer:
        updated = self.repository.set_active(code, active)
        if updated is None:
            raise OfferNotFound(f"Offer {normalize_code(code)} not found")
        logger.info("Offer %s %s", updated.code, "enabled" if active else "disabled")
        return updated

    def delete_offer(self, code: str) -> None:
        if not self.repository.delete_offer(code):
            raise OfferNotFound(f"Offer {normalize_code(code)} not found")
        logger.info("Offer %s deleted", normalize_code(code))


__all__ = ["OfferAdminService", "OfferNotFound", "OfferValidationError"]
