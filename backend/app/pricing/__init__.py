"""Pricing calculator for the plan catalog."""

from .calculator import (
    InvalidPackage,
    InvalidPlan,
    PricingError,
    domestic_tax,
    enterprise_plan_id,
    is_domestic,
    normalize_package,
    price_enterprise,
    price_one_time,
    price_starter_pro,
    round_half_up,
    starter_pro_plan_id,
)
from .models import PricingQuote

__all__ = [
    "InvalidPackage",
    "InvalidPlan",
    "PricingError",
    "PricingQuote",
    "domestic_tax",
    "enterprise_plan_id",
    "is_domestic",
    "normalize_package",
    "price_enterprise",
    "price_one_time",
    "price_starter_pro",
    "round_half_up",
    "starter_pro_plan_id",
]
