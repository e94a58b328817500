"""Price tables and tax constants used by the pricing calculator.

All prices are whole currency units, tax exclusive.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Dict

DOMESTIC_COUNTRY = "India"
TAX_RATE = Decimal("0.18")

MONTHS_PER_YEAR = 12
YEARLY_MULTIPLIER = Decimal("0.8")

ONE_TIME_PRICES: Dict[str, int] = {
    "STARTER_ONE_TIME": 20000,
    "PRO_ONE_TIME": 30000,
    "PLAN_60": 40000,
    "PLAN_90": 55000,
    "PLAN_120": 70000,
}

CONSULTATION_PACKAGE = "consultation"
CONSULTATION_FEE = 5000

ENTERPRISE_MONTHLY_PRICES: Dict[str, int] = {
    "60": 35000,
    "90": 50000,
    "120": 65000,
}

ENTERPRISE_PLAN_IDS: Dict[str, str] = {
    "60": "ENT_60",
    "90": "ENT_90",
    "120": "ENT_120",
    CONSULTATION_PACKAGE: "ENT_CONSULTATION",
}

STARTER_PRO_MONTHLY_PRICES: Dict[str, int] = {
    "starter": 15000,
    "pro": 25000,
}

STARTER_PRO_PLAN_IDS: Dict[str, str] = {
    "starter": "STARTER",
    "pro": "PRO",
}
