"""Payment gateway integrations used by checkout."""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
from typing import Any, Dict, Mapping, Optional, Protocol
from urllib import error as urllib_error
from urllib import request as urllib_request
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

RAZORPAY_API_URL = "https://api.razorpay.com/v1"


class GatewayError(RuntimeError):
    """Raised when the payment gateway cannot be reached or rejects a call."""


class InvalidGatewaySignature(ValueError):
    """Raised when a payment callback signature does not verify."""


class GatewayNotConfigured(RuntimeError):
    """Raised when no payment gateway credentials are configured."""


class GatewayOrder(BaseModel):
    """Order record as returned by the gateway."""

    id: str
    amount: int
    currency: str
    receipt: Optional[str] = None
    status: str = "created"
    notes: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "GatewayOrder":
        notes = payload.get("notes")
        return cls(
            id=str(payload["id"]),
            amount=int(payload.get("amount", 0)),
            currency=str(payload.get("currency", "")),
            receipt=payload.get("receipt"),
            status=str(payload.get("status", "created")),
            notes={str(k): str(v) for k, v in notes.items()} if isinstance(notes, dict) else {},
        )


class PaymentGateway(Protocol):
    """External payment processor integration."""

    key_id: Optional[str]

    def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Mapping[str, str],
    ) -> GatewayOrder:
        """Create an order for ``amount`` minor currency units."""

    def fetch_payment(self, payment_id: str) -> Dict[str, Any]:
        ...

    def fetch_order(self, order_id: str) -> GatewayOrder:
        ...

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        ...


def compute_callback_signature(secret: str, order_id: str, payment_id: str) -> str:
    """Hex HMAC-SHA-256 over ``order_id|payment_id`` as issued by the gateway."""

    body = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


class RazorpayGateway:
    """Razorpay REST client using HTTP basic auth."""

    def __init__(
        self,
        *,
        key_id: str,
        key_secret: str,
        base_url: str = RAZORPAY_API_URL,
        timeout: float = 10.0,
    ) -> None:
        if not key_id or not key_secret:
            raise ValueError("key_id and key_secret must be provided")
        self.key_id = key_id
        self._key_secret = key_secret
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        token = base64.b64encode(f"{key_id}:{key_secret}".encode("utf-8")).decode("ascii")
        self._auth_header = f"Basic {token}"

    def _request(self, method: str, path: str, payload: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        req = urllib_request.Request(
            f"{self._base_url}{path}",
            data=data,
            method=method,
            headers={"Authorization": self._auth_header, "Content-Type": "application/json"},
        )
        try:
            with urllib_request.urlopen(req, timeout=self._timeout) as response:
                body = response.read()
            return json.loads(body.decode("utf-8"))
        except urllib_error.HTTPError as exc:
            raise GatewayError(f"Gateway responded with HTTP {exc.code} for {method} {path}") from exc
        except (urllib_error.URLError, OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise GatewayError(f"Gateway request failed for {method} {path}: {exc}") from exc

    def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Mapping[str, str],
    ) -> GatewayOrder:
        payload = {"amount": amount, "currency": currency, "receipt": receipt, "notes": dict(notes)}
        return GatewayOrder.from_payload(self._request("POST", "/orders", payload))

    def fetch_payment(self, payment_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/payments/{payment_id}")

    def fetch_order(self, order_id: str) -> GatewayOrder:
        return GatewayOrder.from_payload(self._request("GET", f"/orders/{order_id}"))

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return compute_callback_signature(self._key_secret, order_id, payment_id) == signature


class UnconfiguredGateway:
    """Gateway used when credentials are missing; every call fails closed."""

    key_id: Optional[str] = None

    def __init__(self, reason: str = "Payment gateway is not configured") -> None:
        self.reason = reason

    def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Mapping[str, str],
    ) -> GatewayOrder:
        raise GatewayNotConfigured(self.reason)

    def fetch_payment(self, payment_id: str) -> Dict[str, Any]:
        raise GatewayNotConfigured(self.reason)

    def fetch_order(self, order_id: str) -> GatewayOrder:
        raise GatewayNotConfigured(self.reason)

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        raise GatewayNotConfigured(self.reason)


class LocalSandboxGateway:
    """Offline gateway for local development and tests, enabled explicitly."""

    def __init__(self, *, secret: str, key_id: str = "rzp_sandbox") -> None:
        if not secret:
            raise ValueError("secret must be provided")
        self.key_id = key_id
        self._secret = secret
        self.orders: Dict[str, GatewayOrder] = {}

    def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Mapping[str, str],
    ) -> GatewayOrder:
        order = GatewayOrder(
            id=f"order_{uuid4().hex[:14]}",
            amount=amount,
            currency=currency,
            receipt=receipt,
            notes=dict(notes),
        )
        self.orders[order.id] = order
        return order

    def fetch_payment(self, payment_id: str) -> Dict[str, Any]:
        return {"id": payment_id, "status": "captured", "method": "sandbox"}

    def fetch_order(self, order_id: str) -> GatewayOrder:
        order = self.orders.get(order_id)
        if order is None:
            raise GatewayError(f"Unknown sandbox order {order_id}")
        return order

    def sign_payment(self, order_id: str, payment_id: str) -> str:
        return compute_callback_signature(self._secret, order_id, payment_id)

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return self.sign_payment(order_id, payment_id) == signature


__all__ = [
    "GatewayError",
    "GatewayNotConfigured",
    "GatewayOrder",
    "InvalidGatewaySignature",
    "LocalSandboxGateway",
    "PaymentGateway",
    "RazorpayGateway",
    "UnconfiguredGateway",
    "compute_callback_signature",
]
