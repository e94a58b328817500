"""Pure pricing functions for the one-time, enterprise and starter/pro segments."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from ..catalog import BillingCadence, PlanKind, find_plan
from .models import PricingQuote
from .tables import (
    CONSULTATION_FEE,
    CONSULTATION_PACKAGE,
    DOMESTIC_COUNTRY,
    ENTERPRISE_MONTHLY_PRICES,
    ENTERPRISE_PLAN_IDS,
    MONTHS_PER_YEAR,
    ONE_TIME_PRICES,
    STARTER_PRO_MONTHLY_PRICES,
    STARTER_PRO_PLAN_IDS,
    TAX_RATE,
    YEARLY_MULTIPLIER,
)

Cadence = Union[BillingCadence, str]
Number = Union[int, float, Decimal]


class PricingError(ValueError):
    """Base class for pricing input errors."""


class InvalidPackage(PricingError):
    """Raised when an enterprise package is not recognised."""


class InvalidPlan(PricingError):
    """Raised when a plan identifier cannot be priced by the requested segment."""


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves away from zero."""

    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_domestic(country: Optional[str], domestic_country: str = DOMESTIC_COUNTRY) -> bool:
    if not country:
        return False
    return country.strip().lower() == domestic_country.strip().lower()


def domestic_tax(base: int) -> int:
    return round_half_up(Decimal(base) * TAX_RATE)


def normalize_package(pkg: object) -> str:
    key = str(pkg if pkg is not None else "").strip().lower()
    if key != CONSULTATION_PACKAGE and key not in ENTERPRISE_MONTHLY_PRICES:
        raise InvalidPackage(f"Unknown enterprise package: {pkg!r}")
    return key


def enterprise_plan_id(pkg: object) -> str:
    return ENTERPRISE_PLAN_IDS[normalize_package(pkg)]


def normalize_starter_pro_tier(plan_id: str) -> str:
    plan = find_plan(plan_id) or find_plan(str(plan_id or "").strip().upper())
    if plan is not None and plan.kind == PlanKind.SUBSCRIPTION and plan.tier in STARTER_PRO_MONTHLY_PRICES:
        return plan.tier
    key = str(plan_id or "").strip().lower()
    if key in STARTER_PRO_MONTHLY_PRICES:
        return key
    raise InvalidPlan(f"Unknown starter/pro plan: {plan_id!r}")


def starter_pro_plan_id(plan_id: str) -> str:
    return STARTER_PRO_PLAN_IDS[normalize_starter_pro_tier(plan_id)]


def _is_yearly(cadence: Optional[Cadence]) -> bool:
    value = cadence.value if isinstance(cadence, BillingCadence) else str(cadence or "")
    return value.strip().lower() == BillingCadence.YEARLY.value


def _subscription_base(monthly_base: int, cadence: Optional[Cadence]) -> int:
    if _is_yearly(cadence):
        return round_half_up(Decimal(monthly_base) * MONTHS_PER_YEAR * YEARLY_MULTIPLIER)
    return monthly_base


def _quote(base: int, *, taxed: bool) -> PricingQuote:
    return PricingQuote.from_base(base, domestic_tax(base) if taxed else 0)


def price_one_time(plan_id: str, custom_base: Optional[Number] = None) -> PricingQuote:
    """Price a one-time plan.

    A positive ``custom_base`` replaces the table price. Tax is always applied.
    """

    plan = find_plan(plan_id)
    if plan is None or plan.plan_id not in ONE_TIME_PRICES:
        raise InvalidPlan(f"Unknown one-time plan: {plan_id!r}")

    base = ONE_TIME_PRICES[plan.plan_id]
    if custom_base is not None and custom_base > 0:
        base = round_half_up(custom_base)
    return _quote(base, taxed=True)


def price_enterprise(
    pkg: object,
    billing_cadence: Optional[Cadence],
    country: Optional[str],
    *,
    domestic_country: str = DOMESTIC_COUNTRY,
) -> PricingQuote:
    """Price an enterprise package.

    The consultation package is a one-time fee whatever cadence is requested.
    Yearly billing charges twelve months at 80%; every other cadence charges the
    monthly base.
    """

    key = normalize_package(pkg)
    if key == CONSULTATION_PACKAGE:
        base = CONSULTATION_FEE
    else:
        base = _subscription_base(ENTERPRISE_MONTHLY_PRICES[key], billing_cadence)
    return _quote(base, taxed=is_domestic(country, domestic_country))


def price_starter_pro(
    plan_id: str,
    billing_cadence: Optional[Cadence],
    country: Optional[str],
    *,
    domestic_country: str = DOMESTIC_COUNTRY,
) -> PricingQuote:
    tier = normalize_starter_pro_tier(plan_id)
    base = _subscription_base(STARTER_PRO_MONTHLY_PRICES[tier], billing_cadence)
    return _quote(base, taxed=is_domestic(country, domestic_country))
