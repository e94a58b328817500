from __future__ import annotations

from typing import Dict
from urllib.parse import parse_qs, urlsplit

import pytest

from backend.app.contracts import (
    BadSignature,
    ContractDraft,
    ContractService,
    ContractSigner,
    Expired,
    InMemoryContractStore,
    InvalidTimestamp,
    MissingParams,
    NotFound,
    OneTimeContext,
    PricingSnapshot,
    SigningSecretMissing,
    ThankYouContract,
    parse_timestamp_ms,
)


@pytest.fixture
def contract(clock) -> ThankYouContract:
    draft = ContractDraft(
        context=OneTimeContext(plan_id="PLAN_60"),
        pricing=PricingSnapshot(base=40000, tax=7200, final=47200, currency="INR", is_domestic=True),
    )
    return ThankYouContract.from_draft(draft, order_id="order_1", payment_id="pay_1", created_at=clock())


def _link_params(url: str) -> Dict[str, str]:
    return {key: values[0] for key, values in parse_qs(urlsplit(url).query).items()}


def _redeem(service: ContractService, params: Dict[str, str], **overrides) -> ThankYouContract:
    values = {
        "order_id": params["order_id"],
        "payment_id": params["payment_id"],
        "timestamp": params["ts"],
        "signature": params["sig"],
    }
    values.update(overrides)
    return service.verify(**values)


def test_issue_returns_signed_link(contract_service: ContractService, contract, clock, signer, thank_you_url) -> None:
    url = contract_service.issue(contract)

    assert url.startswith(f"{thank_you_url}?")
    params = _link_params(url)
    assert params["order_id"] == "order_1"
    assert params["payment_id"] == "pay_1"
    assert params["ts"] == str(int(clock().timestamp() * 1000))
    assert params["sig"] == signer.sign("order_1", "pay_1", params["ts"])


def test_fresh_link_returns_contract(contract_service: ContractService, contract, clock) -> None:
    params = _link_params(contract_service.issue(contract))
    clock.advance(minutes=14)

    assert _redeem(contract_service, params) == contract
    assert _redeem(contract_service, params, version="v1") == contract


def test_link_expires_after_fifteen_minutes(contract_service: ContractService, contract, clock) -> None:
    params = _link_params(contract_service.issue(contract))
    clock.advance(minutes=16)

    with pytest.raises(Expired) as exc:
        _redeem(contract_service, params)

    assert exc.value.status_code == 401
    assert exc.value.payload == {
        "version": "v1",
        "error": {"code": "expired", "message": "This link has expired"},
    }


def test_future_timestamp_beyond_window_is_expired(contract_service: ContractService, clock, signer) -> None:
    future = str(int(clock().timestamp() * 1000) + 16 * 60 * 1000)
    signature = signer.sign("order_1", "pay_1", future)

    with pytest.raises(Expired):
        contract_service.verify(order_id="order_1", payment_id="pay_1", timestamp=future, signature=signature)


def test_tampered_link_is_rejected(contract_service: ContractService, contract) -> None:
    params = _link_params(contract_service.issue(contract))

    with pytest.raises(BadSignature) as exc:
        _redeem(contract_service, params, payment_id="pay_2")
    assert exc.value.status_code == 401

    with pytest.raises(BadSignature):
        _redeem(contract_service, params, signature="A" * len(params["sig"]))


def test_valid_link_without_stored_contract(contract_service: ContractService, clock, signer) -> None:
    ts = str(int(clock().timestamp() * 1000))
    signature = signer.sign("order_9", "pay_9", ts)

    with pytest.raises(NotFound) as exc:
        contract_service.verify(order_id="order_9", payment_id="pay_9", timestamp=ts, signature=signature)
    assert exc.value.status_code == 404


def test_contract_gone_after_store_ttl(contract, clock, signer, thank_you_url) -> None:
    store = InMemoryContractStore(ttl_seconds=60, clock=clock)
    service = ContractService(signer, store, thank_you_url=thank_you_url, clock=clock)
    params = _link_params(service.issue(contract))
    clock.advance(minutes=2)

    with pytest.raises(NotFound):
        _redeem(service, params)


@pytest.mark.parametrize(
    "overrides",
    [
        {"signature": None},
        {"signature": ""},
        {"order_id": None},
        {"payment_id": ""},
        {"timestamp": None},
        {"version": "v2"},
        {"version": ""},
    ],
)
def test_missing_or_unsupported_params(contract_service: ContractService, contract, overrides) -> None:
    params = _link_params(contract_service.issue(contract))

    with pytest.raises(MissingParams) as exc:
        _redeem(contract_service, params, **overrides)
    assert exc.value.status_code == 400


@pytest.mark.parametrize("timestamp", ["abc", "inf", "nan", "12:30"])
def test_unparseable_timestamp(contract_service: ContractService, contract, timestamp: str) -> None:
    params = _link_params(contract_service.issue(contract))

    with pytest.raises(InvalidTimestamp) as exc:
        _redeem(contract_service, params, timestamp=timestamp)
    assert exc.value.status_code == 400


def test_seconds_timestamp_is_accepted(contract_service: ContractService, contract, clock, signer) -> None:
    contract_service.issue(contract)
    seconds = str(int(clock().timestamp()))
    signature = signer.sign("order_1", "pay_1", seconds)

    assert (
        contract_service.verify(order_id="order_1", payment_id="pay_1", timestamp=seconds, signature=signature)
        == contract
    )


def test_unconfigured_secret_fails_closed(contract_store: InMemoryContractStore, clock, thank_you_url) -> None:
    service = ContractService(ContractSigner(None), contract_store, thank_you_url=thank_you_url, clock=clock)

    assert service.configured is False
    with pytest.raises(SigningSecretMissing) as exc:
        service.verify(order_id="order_1", payment_id="pay_1", timestamp="abc", signature="sig")
    assert exc.value.status_code == 500


def test_issue_without_secret_raises(contract_store: InMemoryContractStore, contract, clock, thank_you_url) -> None:
    service = ContractService(ContractSigner(None), contract_store, thank_you_url=thank_you_url, clock=clock)

    with pytest.raises(SigningSecretMissing):
        service.issue(contract)
    assert len(contract_store) == 0


@pytest.mark.parametrize(
    "literal, expected",
    [
        ("1700000000", 1700000000000),
        ("1700000000000", 1700000000000),
        (" 1700000000123 ", 1700000000123),
        ("1700000000.5", 1700000000500),
    ],
)
def test_parse_timestamp_ms(literal: str, expected: int) -> None:
    assert parse_timestamp_ms(literal) == expected
