from __future__ import annotations

import json
from pathlib import Path

import pytest

from backend.app.offers import (
    DiscountType,
    InMemoryOfferRepository,
    JsonFileOfferRepository,
    Offer,
    OfferApplicability,
    OfferStoreError,
)


def _write(path: Path, payload) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_missing_file_is_an_empty_store(tmp_path: Path) -> None:
    repository = JsonFileOfferRepository(tmp_path / "offers.json")

    assert repository.list_offers() == []


def test_legacy_records_are_written_back_canonical(tmp_path: Path) -> None:
    path = tmp_path / "offers.json"
    _write(path, [{"code": "old", "type": "PERCENT", "amount": 5, "enabled": True, "plans": ["one_time_60_videos"]}])
    repository = JsonFileOfferRepository(path)

    repository.upsert_offer(
        Offer(code="NEW", discount_type=DiscountType.FIXED, amount=500, applies_to=OfferApplicability(plans=("PLAN_90",)))
    )

    records = {record["code"]: record for record in json.loads(path.read_text(encoding="utf-8"))}
    assert set(records) == {"OLD", "NEW"}
    assert records["OLD"]["active"] is True
    assert "enabled" not in records["OLD"]
    assert records["OLD"]["appliesTo"]["plans"] == ["PLAN_60"]
    assert records["NEW"]["type"] == "FIXED"


def test_invalid_json_raises_store_error(tmp_path: Path) -> None:
    path = tmp_path / "offers.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(OfferStoreError):
        JsonFileOfferRepository(path).list_offers()


def test_non_array_payload_raises_store_error(tmp_path: Path) -> None:
    path = tmp_path / "offers.json"
    _write(path, {"code": "SAVE10"})

    with pytest.raises(OfferStoreError):
        JsonFileOfferRepository(path).list_offers()


def test_invalid_records_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "offers.json"
    _write(path, [1, {"code": "BROKEN"}, {"code": "OK", "type": "FIXED", "amount": 100}])

    offers = JsonFileOfferRepository(path).list_offers()

    assert [offer.code for offer in offers] == ["OK"]


def test_toggle_and_delete_persist(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "offers.json"
    repository = JsonFileOfferRepository(path)
    repository.upsert_offer(Offer(code="SAVE10", discount_type=DiscountType.FIXED, amount=1000))

    updated = repository.set_active("save10", False)

    assert updated is not None and updated.active is False
    assert json.loads(path.read_text(encoding="utf-8"))[0]["active"] is False

    assert repository.delete_offer("SAVE10") is True
    assert json.loads(path.read_text(encoding="utf-8")) == []
    assert JsonFileOfferRepository(path).list_offers() == []


def test_in_memory_unknown_codes() -> None:
    repository = InMemoryOfferRepository()

    assert repository.set_active("MISSING", True) is None
    assert repository.delete_offer("MISSING") is False


def test_non_finite_amounts_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "offers.json"
    _write(
        path,
        [
            {"code": "NAN", "type": "PERCENT", "amount": float("nan")},
            {"code": "INF", "type": "FIXED", "amount": float("inf")},
            {"code": "OK", "type": "FIXED", "amount": 100},
        ],
    )

    offers = JsonFileOfferRepository(path).list_offers()

    assert [offer.code for offer in offers] == ["OK"]


class FailingWriteRepository(InMemoryOfferRepository):
    def _after_write(self) -> None:
        raise OfferStoreError("disk full")


def test_failed_write_leaves_memory_unchanged() -> None:
    original = Offer(code="SAVE10", discount_type=DiscountType.FIXED, amount=1000)
    repository = FailingWriteRepository([original])

    with pytest.raises(OfferStoreError):
        repository.upsert_offer(Offer(code="NEW", discount_type=DiscountType.FIXED, amount=500))
    with pytest.raises(OfferStoreError):
        repository.upsert_offer(original.model_copy(update={"amount": 1}))
    with pytest.raises(OfferStoreError):
        repository.set_active("SAVE10", False)
    with pytest.raises(OfferStoreError):
        repository.delete_offer("SAVE10")

    assert repository.list_offers() == [original]


def test_failed_file_write_keeps_previous_state(tmp_path: Path) -> None:
    path = tmp_path / "store" / "offers.json"
    repository = JsonFileOfferRepository(path)
    repository.upsert_offer(Offer(code="SAVE10", discount_type=DiscountType.FIXED, amount=1000))
    path.unlink()
    path.parent.rmdir()
    # a regular file where the parent directory should be makes every write fail
    path.parent.write_text("", encoding="utf-8")

    with pytest.raises(OfferStoreError):
        repository.set_active("SAVE10", False)
    with pytest.raises(OfferStoreError):
        repository.upsert_offer(Offer(code="NEW", discount_type=DiscountType.FIXED, amount=500))

    offers = repository.list_offers()
    assert [offer.code for offer in offers] == ["SAVE10"]
    assert offers[0].active is True
