from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Sequence

import pytest

from backend.app.offers import (
    DiscountType,
    InMemoryOfferRepository,
    Offer,
    OfferApplicability,
    OfferEngine,
    OfferStoreError,
    OfferValidity,
    apply_offer,
    describe_offer,
    migrate_offer_record,
)
from backend.app.pricing import price_enterprise


class UnavailableOfferRepository(InMemoryOfferRepository):
    def list_offers(self) -> Sequence[Offer]:
        raise OfferStoreError("offers file is corrupt")


def _offer(**overrides) -> Offer:
    values = {
        "code": "SAVE10",
        "discount_type": DiscountType.FIXED,
        "amount": 1000,
        "applies_to": OfferApplicability(plans=("ENT_90",)),
    }
    values.update(overrides)
    return Offer(**values)


def _engine(clock, *offers: Offer, **kwargs) -> OfferEngine:
    return OfferEngine(InMemoryOfferRepository(offers), clock=clock, **kwargs)


def test_fixed_coupon_on_yearly_enterprise(offer_engine: OfferEngine) -> None:
    quote = price_enterprise("90", "yearly", "India")

    offer = offer_engine.resolve("ENT_90", " save10 ")
    result = offer_engine.apply(quote.total, offer)

    assert offer is not None
    assert quote.total == 566400
    assert result.discount == 1000
    assert result.final == 565400
    assert result.description == "₹1000 off via SAVE10"


def test_resolve_maps_legacy_plan_ids(offer_engine: OfferEngine) -> None:
    assert offer_engine.resolve("enterprise_90_yearly", "SAVE10") is not None


@pytest.mark.parametrize("code", [None, "", "   "])
def test_resolve_without_code(offer_engine: OfferEngine, code) -> None:
    assert offer_engine.resolve("ENT_90", code) is None


def test_resolve_unknown_code(offer_engine: OfferEngine) -> None:
    assert offer_engine.resolve("ENT_90", "NOPE") is None


def test_resolve_wrong_plan(offer_engine: OfferEngine) -> None:
    assert offer_engine.resolve("ENT_60", "SAVE10") is None


def test_resolve_inactive_offer(clock) -> None:
    engine = _engine(clock, _offer(active=False))

    assert engine.resolve("ENT_90", "SAVE10") is None


def test_resolve_respects_validity_window(clock) -> None:
    future = _offer(validity=OfferValidity(start=clock() + timedelta(days=1)))
    past = _offer(code="OLD", validity=OfferValidity(end=clock() - timedelta(seconds=1)))
    current = _offer(
        code="NOW",
        validity=OfferValidity(start=clock() - timedelta(days=1), end=clock() + timedelta(days=1)),
    )
    engine = _engine(clock, future, past, current)

    assert engine.resolve("ENT_90", "SAVE10") is None
    assert engine.resolve("ENT_90", "OLD") is None
    assert engine.resolve("ENT_90", "NOW") is not None


def test_resolve_with_empty_plan_list_applies_to_every_plan(clock) -> None:
    engine = _engine(clock, _offer(applies_to=OfferApplicability()))

    assert engine.resolve("PLAN_120", "SAVE10") is not None


def test_resolve_with_empty_store(clock) -> None:
    assert _engine(clock).resolve("ENT_90", "SAVE10") is None


def test_resolve_when_store_unavailable(clock) -> None:
    engine = OfferEngine(UnavailableOfferRepository(), clock=clock)

    assert engine.resolve("ENT_90", "SAVE10") is None


def test_audience_is_informational_by_default(clock) -> None:
    offer = _offer(applies_to=OfferApplicability(plans=("ENT_90",), countries=("India",), billing_types=("yearly",)))
    engine = _engine(clock, offer)

    assert engine.resolve("ENT_90", "SAVE10", billing_type="monthly", country="Germany") is not None


def test_audience_enforced_when_enabled(clock) -> None:
    offer = _offer(applies_to=OfferApplicability(plans=("ENT_90",), countries=("India",), billing_types=("yearly",)))
    engine = _engine(clock, offer, enforce_audience=True)

    assert engine.resolve("ENT_90", "SAVE10", billing_type="yearly", country="india") is not None
    assert engine.resolve("ENT_90", "SAVE10", billing_type="monthly", country="India") is None
    assert engine.resolve("ENT_90", "SAVE10", billing_type="yearly", country="Germany") is None


def test_plan_cadences_are_always_enforced(clock) -> None:
    offer = migrate_offer_record(
        {"code": "save10", "type": "FIXED", "amount": 1000, "plans": ["enterprise_90_yearly", "PLAN_60"]}
    )
    engine = _engine(clock, offer)

    assert engine.resolve("ENT_90", "SAVE10", billing_type="yearly") is not None
    assert engine.resolve("enterprise_90_monthly", "SAVE10", billing_type="monthly") is None
    assert engine.resolve("ENT_90", "SAVE10", billing_type="monthly") is None
    assert engine.resolve("PLAN_60", "SAVE10", billing_type="one_time") is not None


def test_exhausted_offer_still_resolves_with_warning(clock, caplog) -> None:
    engine = _engine(clock, _offer(usage_limit=5, used=5))

    with caplog.at_level(logging.WARNING):
        offer = engine.resolve("ENT_90", "SAVE10")

    assert offer is not None
    assert offer.is_exhausted is True
    assert "usage at limit" in caplog.text


def test_percent_discount_rounds_half_up() -> None:
    offer = _offer(discount_type=DiscountType.PERCENT, amount=12.5)

    result = apply_offer(1001, offer)

    assert result.discount == 125
    assert result.final == 876
    assert result.description == "12.5% off via SAVE10"


def test_discount_is_clamped_to_total() -> None:
    result = apply_offer(5900, _offer(amount=100000))

    assert result.discount == 5900
    assert result.final == 0


def test_percent_over_hundred_is_clamped() -> None:
    result = apply_offer(1000, _offer(discount_type=DiscountType.PERCENT, amount=150))

    assert result.discount == 1000
    assert result.final == 0


def test_apply_without_offer(offer_engine: OfferEngine) -> None:
    result = offer_engine.apply(47200, None)

    assert result.discount == 0
    assert result.final == 47200
    assert result.description == ""


def test_describe_offer_uses_currency_symbol() -> None:
    assert describe_offer(_offer(amount=250.0), currency_symbol="$") == "$250 off via SAVE10"
    assert describe_offer(_offer(discount_type=DiscountType.PERCENT, amount=10)) == "10% off via SAVE10"


def test_offer_code_is_normalized() -> None:
    assert _offer(code="  launch ").code == "LAUNCH"


def test_validity_treats_naive_datetimes_as_utc() -> None:
    validity = OfferValidity(start=datetime(2025, 1, 1), end=datetime(2025, 1, 31))

    assert validity.start == datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert validity.contains(datetime(2025, 1, 15, tzinfo=timezone.utc)) is True
    assert validity.contains(datetime(2025, 2, 1, tzinfo=timezone.utc)) is False
