"""Issue and redeem signed thank-you links."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Callable, Optional
from urllib.parse import urlencode

from .errors import (
    CONTRACT_VERSION,
    BadSignature,
    Expired,
    InvalidTimestamp,
    MissingParams,
    NotFound,
    SigningSecretMissing,
)
from .models import ThankYouContract
from .signer import ContractSigner
from .store import ContractStore

logger = logging.getLogger(__name__)

MILLISECOND_DIGITS = 13


def parse_timestamp_ms(literal: str) -> int:
    """Interpret an epoch literal in seconds or milliseconds.

    Literals with thirteen or more integer digits are milliseconds.
    """

    text = literal.strip()
    try:
        value = float(text)
    except ValueError as exc:
        raise InvalidTimestamp() from exc
    if not math.isfinite(value):
        raise InvalidTimestamp()

    integer_digits = text.lstrip("+-").split(".", 1)[0].split("e", 1)[0].split("E", 1)[0]
    if len(integer_digits) >= MILLISECOND_DIGITS:
        return int(value)
    return int(value * 1000)


class ContractService:
    """Stores contracts and hands out time-boxed capability links for them."""

    def __init__(
        self,
        signer: ContractSigner,
        store: ContractStore,
        *,
        thank_you_url: str,
        max_age_seconds: int = 15 * 60,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._signer = signer
        self._store = store
        self._thank_you_url = thank_you_url
        self._max_age_ms = max_age_seconds * 1000
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def configured(self) -> bool:
        return self._signer.configured

    def _now_ms(self) -> int:
        return int(self._clock().timestamp() * 1000)

    def issue(self, contract: ThankYouContract) -> str:
        """Store ``contract`` and return the signed redirect URL for it."""

        order_id = contract.ids.order_id
        payment_id = contract.ids.payment_id
        timestamp = str(self._now_ms())
        signature = self._signer.sign(order_id, payment_id, timestamp)
        self._store.put(order_id, payment_id, contract)

        query = urlencode(
            {"order_id": order_id, "payment_id": payment_id, "ts": timestamp, "sig": signature}
        )
        logger.info(
            "Thank-you contract issued",
            extra={"order_id": order_id, "payment_id": payment_id, "contract_kind": contract.kind.value},
        )
        return f"{self._thank_you_url}?{query}"

    def verify(
        self,
        *,
        order_id: Optional[str],
        payment_id: Optional[str],
        timestamp: Optional[str],
        signature: Optional[str],
        version: Optional[str] = None,
    ) -> ThankYouContract:
        """Return the stored contract if the link is authentic and fresh."""

        effective_version = CONTRACT_VERSION if version is None else version
        if effective_version != CONTRACT_VERSION or not (order_id and payment_id and timestamp and signature):
            raise MissingParams()
        if not self._signer.configured:
            logger.error("Contract retrieval rejected: signing secret is not configured")
            raise SigningSecretMissing()

        timestamp_ms = parse_timestamp_ms(timestamp)
        if abs(self._now_ms() - timestamp_ms) > self._max_age_ms:
            logger.warning("Expired thank-you link", extra={"order_id": order_id, "payment_id": payment_id})
            raise Expired()

        if not self._signer.verify(order_id, payment_id, timestamp, signature):
            logger.warning("Bad thank-you link signature", extra={"order_id": order_id, "payment_id": payment_id})
            raise BadSignature()

        contract = self._store.get(order_id, payment_id)
        if contract is None:
            raise NotFound()
        return contract


__all__ = ["ContractService", "parse_timestamp_ms"]
