"""HMAC signatures binding a redirect link to one purchase."""
from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Optional

from .errors import CONTRACT_VERSION, SigningSecretMissing


def canonical_string(order_id: str, payment_id: str, timestamp: str) -> str:
    return f"{CONTRACT_VERSION}|order_id={order_id}|payment_id={payment_id}|ts={timestamp}"


def constant_time_equals(expected: str, supplied: str) -> bool:
    expected_bytes = expected.encode("utf-8")
    supplied_bytes = supplied.encode("utf-8")
    if len(expected_bytes) != len(supplied_bytes):
        return False
    return hmac.compare_digest(expected_bytes, supplied_bytes)


class ContractSigner:
    """Signs ``(order_id, payment_id, ts)`` with a server-held secret.

    The signer can be built without a secret so that the application starts;
    every signing attempt then raises :class:`SigningSecretMissing` rather than
    falling back to an empty key.
    """

    def __init__(self, secret: Optional[str]) -> None:
        self._secret = secret.encode("utf-8") if secret else None

    @property
    def configured(self) -> bool:
        return self._secret is not None

    def sign(self, order_id: str, payment_id: str, timestamp: object) -> str:
        if self._secret is None:
            raise SigningSecretMissing()
        message = canonical_string(order_id, payment_id, str(timestamp)).encode("utf-8")
        digest = hmac.new(self._secret, message, hashlib.sha256).digest()
        return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")

    def verify(self, order_id: str, payment_id: str, timestamp: object, signature: str) -> bool:
        return constant_time_equals(self.sign(order_id, payment_id, timestamp), signature)


__all__ = ["ContractSigner", "canonical_string", "constant_time_equals"]
