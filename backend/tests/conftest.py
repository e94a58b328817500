from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping

import pytest

from backend.app.checkout import CheckoutService, LocalSandboxGateway, PaymentWebhookNotifier
from backend.app.contracts import ContractService, ContractSigner, InMemoryContractStore
from backend.app.offers import DiscountType, InMemoryOfferRepository, Offer, OfferApplicability, OfferEngine

THANK_YOU_URL = "https://shop.example.com/thank-you"
SIGNING_SECRET = "test-signing-secret"


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingNotifier(PaymentWebhookNotifier):
    def __init__(self) -> None:
        self.payloads: List[Dict[str, Any]] = []

    def notify(self, payload: Mapping[str, Any]) -> None:
        self.payloads.append(dict(payload))


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def save10() -> Offer:
    return Offer(
        code="SAVE10",
        discount_type=DiscountType.FIXED,
        amount=1000,
        applies_to=OfferApplicability(plans=("ENT_90",)),
    )


@pytest.fixture
def offer_repository(save10: Offer) -> InMemoryOfferRepository:
    return InMemoryOfferRepository([save10])


@pytest.fixture
def offer_engine(offer_repository: InMemoryOfferRepository, clock: FrozenClock) -> OfferEngine:
    return OfferEngine(offer_repository, clock=clock)


@pytest.fixture
def contract_store(clock: FrozenClock) -> InMemoryContractStore:
    return InMemoryContractStore(ttl_seconds=30 * 60, clock=clock)


@pytest.fixture
def thank_you_url() -> str:
    return THANK_YOU_URL


@pytest.fixture
def signer() -> ContractSigner:
    return ContractSigner(SIGNING_SECRET)


@pytest.fixture
def contract_service(
    signer: ContractSigner, contract_store: InMemoryContractStore, clock: FrozenClock, thank_you_url: str
) -> ContractService:
    return ContractService(
        signer,
        contract_store,
        thank_you_url=thank_you_url,
        max_age_seconds=15 * 60,
        clock=clock,
    )


@pytest.fixture
def gateway() -> LocalSandboxGateway:
    return LocalSandboxGateway(secret="gateway-secret")


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def checkout_service(
    gateway: LocalSandboxGateway,
    offer_engine: OfferEngine,
    contract_service: ContractService,
    notifier: RecordingNotifier,
    clock: FrozenClock,
) -> CheckoutService:
    return CheckoutService(
        gateway=gateway,
        offers=offer_engine,
        contracts=contract_service,
        notifier=notifier,
        clock=clock,
    )
