"""Domain models for coupon offers."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DiscountType(str, Enum):
    """How an offer reduces the total."""

    PERCENT = "PERCENT"
    FIXED = "FIXED"


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class OfferApplicability(BaseModel):
    """Audience restrictions. An empty tuple means unrestricted.

    ``plan_cadences`` narrows individual plans to the listed billing cadences;
    plans without an entry accept every cadence.
    """

    plans: Tuple[str, ...] = ()
    billing_types: Tuple[str, ...] = Field(default=(), alias="billingTypes")
    countries: Tuple[str, ...] = ()
    plan_cadences: Dict[str, Tuple[str, ...]] = Field(default_factory=dict, alias="planCadences")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def allows_cadence(self, plan_id: str, cadence: Optional[str]) -> bool:
        allowed = self.plan_cadences.get(plan_id)
        if not allowed or cadence is None:
            return True
        return cadence.strip().lower() in {value.lower() for value in allowed}


class OfferValidity(BaseModel):
    """Optional validity window, either bound may be open."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("start", "end")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    def contains(self, moment: datetime) -> bool:
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True


class Offer(BaseModel):
    """Canonical coupon record."""

    code: str = Field(min_length=1)
    discount_type: DiscountType = Field(alias="type")
    amount: float = Field(allow_inf_nan=False)
    active: bool = True
    applies_to: OfferApplicability = Field(default_factory=OfferApplicability, alias="appliesTo")
    usage_limit: Optional[int] = Field(default=None, alias="usageLimit")
    used: int = Field(default=0, ge=0)
    validity: OfferValidity = Field(default_factory=OfferValidity)
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        return normalize_code(value)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    @property
    def is_exhausted(self) -> bool:
        """``True`` once the usage counter has reached a configured limit."""
        return self.usage_limit is not None and self.used >= self.usage_limit

    def to_record(self) -> dict:
        """Serialize to the canonical stored shape."""
        return self.model_dump(mode="json", by_alias=True)


class DiscountResult(BaseModel):
    """Outcome of applying an offer to a total."""

    discount: int = Field(ge=0)
    final: int = Field(ge=0)
    description: str = ""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def not_applied(cls, total: int) -> "DiscountResult":
        return cls(discount=0, final=total)


def normalize_code(value: object) -> str:
    return str(value or "").strip().upper()
