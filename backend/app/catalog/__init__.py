"""Plan catalog shared by pricing, offers and the plans API."""

from .models import BillingCadence, PlanDefinition, PlanKind, Segment
from .plans import (
    PLAN_CATALOG,
    PLANS,
    find_plan,
    get_plan_definition,
    legacy_cadence,
    list_plans,
    resolve_plan_id,
)

__all__ = [
    "BillingCadence",
    "PLAN_CATALOG",
    "PLANS",
    "PlanDefinition",
    "PlanKind",
    "Segment",
    "find_plan",
    "get_plan_definition",
    "legacy_cadence",
    "list_plans",
    "resolve_plan_id",
]
