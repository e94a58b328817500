"""Static catalog definitions for purchasable plans."""
from __future__ import annotations

from typing import Dict, List, Optional

from .models import BillingCadence, PlanDefinition, PlanKind, Segment

_SUBSCRIPTION_CADENCES = (BillingCadence.MONTHLY, BillingCadence.YEARLY)
_ONE_TIME_CADENCES = (BillingCadence.ONE_TIME,)


PLANS: tuple[PlanDefinition, ...] = (
    PlanDefinition(
        plan_id="STARTER",
        label="Starter – Subscription",
        tier="starter",
        kind=PlanKind.SUBSCRIPTION,
        segment=Segment.STARTER_PRO,
        cadences=_SUBSCRIPTION_CADENCES,
        sort_order=10,
        legacy_ids=("starter_subscription",),
    ),
    PlanDefinition(
        plan_id="PRO",
        label="Pro – Subscription",
        tier="pro",
        kind=PlanKind.SUBSCRIPTION,
        segment=Segment.STARTER_PRO,
        cadences=_SUBSCRIPTION_CADENCES,
        sort_order=20,
        legacy_ids=("pro_subscription",),
    ),
    PlanDefinition(
        plan_id="ENT_60",
        label="Enterprise 60",
        tier="enterprise_60",
        kind=PlanKind.SUBSCRIPTION,
        segment=Segment.ENTERPRISE,
        cadences=_SUBSCRIPTION_CADENCES,
        sort_order=40,
        legacy_ids=("enterprise_60_monthly", "enterprise_60_yearly"),
    ),
    PlanDefinition(
        plan_id="ENT_90",
        label="Enterprise 90",
        tier="enterprise_90",
        kind=PlanKind.SUBSCRIPTION,
        segment=Segment.ENTERPRISE,
        cadences=_SUBSCRIPTION_CADENCES,
        sort_order=50,
        legacy_ids=("enterprise_90_monthly", "enterprise_90_yearly"),
    ),
    PlanDefinition(
        plan_id="ENT_120",
        label="Enterprise 120",
        tier="enterprise_120",
        kind=PlanKind.SUBSCRIPTION,
        segment=Segment.ENTERPRISE,
        cadences=_SUBSCRIPTION_CADENCES,
        sort_order=60,
        legacy_ids=("enterprise_120_monthly", "enterprise_120_yearly"),
    ),
    PlanDefinition(
        plan_id="STARTER_ONE_TIME",
        label="Starter – One-time",
        tier="starter",
        kind=PlanKind.ONE_TIME,
        segment=Segment.ONE_TIME,
        cadences=_ONE_TIME_CADENCES,
        sort_order=110,
        legacy_ids=("starter_one_time",),
    ),
    PlanDefinition(
        plan_id="PRO_ONE_TIME",
        label="Pro – One-time",
        tier="pro",
        kind=PlanKind.ONE_TIME,
        segment=Segment.ONE_TIME,
        cadences=_ONE_TIME_CADENCES,
        sort_order=120,
        legacy_ids=("pro_one_time",),
    ),
    PlanDefinition(
        plan_id="PLAN_60",
        label="One-time – Up to 60 Videos",
        tier="videos_60",
        kind=PlanKind.ONE_TIME,
        segment=Segment.ONE_TIME,
        cadences=_ONE_TIME_CADENCES,
        sort_order=130,
        legacy_ids=("one_time_60_videos",),
    ),
    PlanDefinition(
        plan_id="PLAN_90",
        label="One-time – Up to 90 Videos",
        tier="videos_90",
        kind=PlanKind.ONE_TIME,
        segment=Segment.ONE_TIME,
        cadences=_ONE_TIME_CADENCES,
        sort_order=131,
        legacy_ids=("one_time_90_videos",),
    ),
    PlanDefinition(
        plan_id="PLAN_120",
        label="One-time – Up to 120 Videos",
        tier="videos_120",
        kind=PlanKind.ONE_TIME,
        segment=Segment.ONE_TIME,
        cadences=_ONE_TIME_CADENCES,
        sort_order=132,
        legacy_ids=("one_time_120_videos",),
    ),
    PlanDefinition(
        plan_id="ENT_CONSULTATION",
        label="One-time – 60-min Consultation",
        tier="consult_60",
        kind=PlanKind.ONE_TIME,
        segment=Segment.ENTERPRISE,
        cadences=_ONE_TIME_CADENCES,
        consultation=True,
        sort_order=200,
        legacy_ids=("one_time_consult_60", "enterprise_consultation_call_one_time"),
    ),
)

PLAN_CATALOG: Dict[str, PlanDefinition] = {plan.plan_id: plan for plan in PLANS}

_LEGACY_ALIASES: Dict[str, str] = {
    legacy_id: plan.plan_id for plan in PLANS for legacy_id in plan.legacy_ids
}


def resolve_plan_id(plan_id: str) -> str:
    """Map a legacy plan identifier to its canonical id.

    Unknown identifiers are returned unchanged so that offers referring to
    retired plans survive migration untouched.
    """

    candidate = (plan_id or "").strip()
    if candidate in PLAN_CATALOG:
        return candidate
    return _LEGACY_ALIASES.get(candidate, candidate)


def find_plan(plan_id: str) -> Optional[PlanDefinition]:
    return PLAN_CATALOG.get(resolve_plan_id(plan_id))


def get_plan_definition(plan_id: str) -> PlanDefinition:
    """Return a plan definition, raising if unsupported."""

    plan = find_plan(plan_id)
    if plan is None:
        raise KeyError(f"Unknown plan id: {plan_id}")
    return plan


def list_plans() -> List[PlanDefinition]:
    return sorted(PLANS, key=lambda plan: plan.sort_order)


def legacy_cadence(plan_id: str) -> Optional[BillingCadence]:
    """Billing cadence encoded in a retired plan id such as ``enterprise_60_yearly``."""

    candidate = (plan_id or "").strip()
    if candidate not in _LEGACY_ALIASES:
        return None
    for cadence in BillingCadence:
        if candidate.endswith(f"_{cadence.value}"):
            return cadence
    return None
