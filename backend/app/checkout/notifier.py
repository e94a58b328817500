"""Best-effort delivery of verified payments to the workflow webhook."""
from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Protocol
from urllib import error as urllib_error
from urllib import request as urllib_request

logger = logging.getLogger("checkout.webhook")


class PaymentWebhookNotifier(Protocol):
    """Dispatches verified payment events to downstream automation."""

    def notify(self, payload: Mapping[str, Any]) -> None:
        ...


class LoggingWebhookNotifier(PaymentWebhookNotifier):
    """Notifier used when no webhook URL is configured."""

    def notify(self, payload: Mapping[str, Any]) -> None:
        logger.info(
            "Webhook not configured, verified payment order=%s payment=%s",
            payload.get("razorpay_order_id"),
            payload.get("razorpay_payment_id"),
        )


class HttpWebhookNotifier(PaymentWebhookNotifier):
    """POSTs the payload as JSON. Failures are logged and never raised."""

    def __init__(self, url: str, *, timeout: float = 5.0) -> None:
        self.url = url
        self.timeout = timeout

    def notify(self, payload: Mapping[str, Any]) -> None:
        body = json.dumps(payload, default=str).encode("utf-8")
        req = urllib_request.Request(
            self.url,
            data=body,
            method="POST",
            headers={"Content-Type": "application/json"},
        )
        try:
            with urllib_request.urlopen(req, timeout=self.timeout) as response:
                status = response.status
                text = response.read(512).decode("utf-8", errors="replace")
        except (urllib_error.URLError, OSError, ValueError) as exc:
            logger.warning(
                "Payment webhook delivery failed",
                extra={"webhook_url": self.url, "error": str(exc)},
            )
            return
        logger.info("Payment webhook responded status=%s body=%s", status, text)


__all__ = ["HttpWebhookNotifier", "LoggingWebhookNotifier", "PaymentWebhookNotifier"]
