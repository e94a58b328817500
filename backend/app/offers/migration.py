"""Upgrade stored offer records to the canonical :class:`Offer` shape.

Older records were written by earlier versions of the admin tooling:

* ``enabled`` instead of ``active``
* flat ``plans`` / ``billingTypes`` / ``countries`` arrays instead of ``appliesTo``
* ``startAt`` / ``endAt`` instead of ``validity``
* plan ids from the retired catalog naming scheme
* billing cadence folded into those plan ids (``enterprise_60_monthly``)

Migration runs once when records are loaded; everything downstream sees
canonical offers only.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Tuple

from ..catalog import legacy_cadence, resolve_plan_id
from .models import Offer

_TYPE_ALIASES = {
    "PERCENT": "PERCENT",
    "PERCENTAGE": "PERCENT",
    "FIXED": "FIXED",
    "FLAT": "FIXED",
    "AMOUNT": "FIXED",
}


def _string_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Iterable):
        return ()
    return tuple(str(item).strip() for item in value if item is not None and str(item).strip())


def _resolve_active(raw: Mapping[str, Any]) -> bool:
    if raw.get("active") is not None:
        return bool(raw["active"])
    if raw.get("enabled") is not None:
        return bool(raw["enabled"])
    return True


def _resolve_plan_cadences(source: Mapping[str, Any], plans: Tuple[str, ...]) -> Dict[str, Tuple[str, ...]]:
    cadences: Dict[str, Tuple[str, ...]] = {}
    explicit = source.get("planCadences")
    if isinstance(explicit, Mapping):
        for plan, values in explicit.items():
            allowed = _string_tuple(values)
            if allowed:
                key = resolve_plan_id(str(plan))
                cadences[key] = tuple(dict.fromkeys(cadences.get(key, ()) + allowed))

    # retired ids like enterprise_60_yearly carried the cadence in the id itself
    derived: Dict[str, Tuple[str, ...]] = {}
    unrestricted = set()
    for plan in plans:
        canonical = resolve_plan_id(plan)
        cadence = legacy_cadence(plan)
        if cadence is None:
            unrestricted.add(canonical)
        else:
            derived[canonical] = tuple(dict.fromkeys(derived.get(canonical, ()) + (cadence.value,)))
    for plan, values in derived.items():
        if plan not in unrestricted and plan not in cadences:
            cadences[plan] = values
    return cadences


def _resolve_applies_to(raw: Mapping[str, Any]) -> Dict[str, Any]:
    structured = raw.get("appliesTo")
    source: Mapping[str, Any] = structured if isinstance(structured, Mapping) else raw
    plans = _string_tuple(source.get("plans", source.get("planIds")))
    return {
        "plans": tuple(dict.fromkeys(resolve_plan_id(plan) for plan in plans)),
        "billingTypes": _string_tuple(source.get("billingTypes")),
        "countries": _string_tuple(source.get("countries")),
        "planCadences": _resolve_plan_cadences(source, plans),
    }


def _resolve_validity(raw: Mapping[str, Any]) -> Dict[str, Any]:
    validity = raw.get("validity")
    if isinstance(validity, Mapping):
        return {"start": validity.get("start") or None, "end": validity.get("end") or None}
    return {"start": raw.get("startAt") or None, "end": raw.get("endAt") or None}


def migrate_offer_record(raw: Mapping[str, Any]) -> Offer:
    """Return the canonical offer for a stored record of any known shape.

    Raises ``ValueError`` (pydantic ``ValidationError``) when the record cannot
    be interpreted at all.
    """

    raw_type = str(raw.get("type") or raw.get("discountType") or "").strip().upper()
    amount = raw.get("amount", raw.get("value"))
    record = {
        "code": raw.get("code"),
        "type": _TYPE_ALIASES.get(raw_type, raw_type),
        "amount": amount,
        "active": _resolve_active(raw),
        "appliesTo": _resolve_applies_to(raw),
        "usageLimit": raw.get("usageLimit") or None,
        "used": raw.get("used") or 0,
        "validity": _resolve_validity(raw),
        "createdAt": raw.get("createdAt"),
        "updatedAt": raw.get("updatedAt"),
    }
    return Offer.model_validate(record)


__all__ = ["migrate_offer_record"]
