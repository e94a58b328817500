"""Checkout configuration helpers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple
import os


@dataclass(frozen=True)
class CheckoutConfig:
    """Configuration for pricing, offers, payment and thank-you contracts."""

    domestic_country: str
    currency: str
    currency_symbol: str
    thank_you_url: str
    signing_secret: Optional[str]
    contract_ttl_seconds: int
    link_max_age_seconds: int
    offers_file: str
    enforce_offer_audience: bool
    admin_secret: Optional[str]
    payment_gateway: str
    sandbox_secret: Optional[str]
    razorpay_key_id: Optional[str]
    razorpay_key_secret: Optional[str]
    gateway_timeout: float
    webhook_url: Optional[str]
    webhook_timeout: float
    cors_allow_origins: Tuple[str, ...]

    @property
    def gateway_configured(self) -> bool:
        return bool(self.razorpay_key_id and self.razorpay_key_secret)


def _to_bool(value: Optional[str], *, default: bool) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return default


def _to_int(value: Optional[str], *, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected integer value, got {value!r}") from exc


def _to_float(value: Optional[str], *, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected float value, got {value!r}") from exc


def _split_csv(value: Optional[str], *, default: str) -> Tuple[str, ...]:
    raw = value if value else default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def load_checkout_config(env: Optional[Mapping[str, str]] = None) -> CheckoutConfig:
    """Load :class:`CheckoutConfig` from environment variables."""

    env_mapping = os.environ if env is None else env

    thank_you_url = env_mapping.get("THANK_YOU_URL", "http://localhost:5173/thank-you")

    return CheckoutConfig(
        domestic_country=(env_mapping.get("DOMESTIC_COUNTRY") or "India").strip(),
        currency=(env_mapping.get("CURRENCY") or "INR").strip().upper(),
        currency_symbol=env_mapping.get("CURRENCY_SYMBOL") or "₹",
        thank_you_url=thank_you_url.rstrip("/"),
        signing_secret=env_mapping.get("THANK_YOU_SIGNING_SECRET") or None,
        contract_ttl_seconds=max(1, _to_int(env_mapping.get("THANK_YOU_CONTRACT_TTL_SECONDS"), default=30 * 60)),
        link_max_age_seconds=max(1, _to_int(env_mapping.get("THANK_YOU_LINK_MAX_AGE_SECONDS"), default=15 * 60)),
        offers_file=env_mapping.get("OFFERS_FILE") or "data/offers.json",
        enforce_offer_audience=_to_bool(env_mapping.get("OFFERS_ENFORCE_AUDIENCE"), default=False),
        admin_secret=env_mapping.get("ADMIN_SECRET") or None,
        payment_gateway=(env_mapping.get("PAYMENT_GATEWAY") or "razorpay").strip().lower(),
        sandbox_secret=env_mapping.get("PAYMENT_SANDBOX_SECRET") or None,
        razorpay_key_id=env_mapping.get("RAZORPAY_KEY_ID") or None,
        razorpay_key_secret=env_mapping.get("RAZORPAY_KEY_SECRET") or None,
        gateway_timeout=max(0.1, _to_float(env_mapping.get("PAYMENT_GATEWAY_TIMEOUT"), default=10.0)),
        webhook_url=env_mapping.get("N8N_PAYMENT_WEBHOOK_URL") or None,
        webhook_timeout=max(0.1, _to_float(env_mapping.get("WEBHOOK_TIMEOUT"), default=5.0)),
        cors_allow_origins=_split_csv(env_mapping.get("CORS_ALLOW_ORIGINS"), default="http://localhost:5173"),
    )


__all__ = ["CheckoutConfig", "load_checkout_config"]
