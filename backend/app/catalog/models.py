"""Domain models describing the plan catalog."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class PlanKind(str, Enum):
    """How a plan is charged."""

    SUBSCRIPTION = "subscription"
    ONE_TIME = "one_time"


class BillingCadence(str, Enum):
    """Billing period classification."""

    MONTHLY = "monthly"
    YEARLY = "yearly"
    ONE_TIME = "one_time"


class Segment(str, Enum):
    """Checkout segment a plan is priced under."""

    ONE_TIME = "one_time"
    ENTERPRISE = "enterprise"
    STARTER_PRO = "starter_pro"


@dataclass(frozen=True)
class PlanDefinition:
    """Describes a purchasable plan."""

    plan_id: str
    label: str
    tier: str
    kind: PlanKind
    segment: Segment
    cadences: Tuple[BillingCadence, ...]
    consultation: bool = False
    sort_order: int = 0
    legacy_ids: Tuple[str, ...] = ()

    def supports(self, cadence: BillingCadence) -> bool:
        return cadence in self.cadences
