"""Application wiring for checkout, offers and thank-you contracts."""
from __future__ import annotations

import logging
from functools import lru_cache

from ..checkout import (
    CheckoutService,
    HttpWebhookNotifier,
    LocalSandboxGateway,
    LoggingWebhookNotifier,
    PaymentGateway,
    PaymentWebhookNotifier,
    RazorpayGateway,
    UnconfiguredGateway,
)
from ..config import CheckoutConfig, load_checkout_config
from ..contracts import ContractService, ContractSigner, InMemoryContractStore
from ..offers import JsonFileOfferRepository, OfferAdminService, OfferEngine, OfferRepository


logger = logging.getLogger("checkout")


@lru_cache(maxsize=1)
def get_checkout_config() -> CheckoutConfig:
    return load_checkout_config()


@lru_cache(maxsize=1)
def get_offer_repository() -> OfferRepository:
    config = get_checkout_config()
    return JsonFileOfferRepository(config.offers_file)


@lru_cache(maxsize=1)
def get_offer_engine() -> OfferEngine:
    config = get_checkout_config()
    return OfferEngine(
        get_offer_repository(),
        enforce_audience=config.enforce_offer_audience,
        currency_symbol=config.currency_symbol,
    )


@lru_cache(maxsize=1)
def get_offer_admin_service() -> OfferAdminService:
    return OfferAdminService(repository=get_offer_repository())


@lru_cache(maxsize=1)
def get_contract_service() -> ContractService:
    config = get_checkout_config()
    if not config.signing_secret:
        logger.error("THANK_YOU_SIGNING_SECRET is not set; thank-you links are disabled")
    store = InMemoryContractStore(ttl_seconds=config.contract_ttl_seconds)
    return ContractService(
        ContractSigner(config.signing_secret),
        store,
        thank_you_url=config.thank_you_url,
        max_age_seconds=config.link_max_age_seconds,
    )


def _build_gateway(config: CheckoutConfig) -> PaymentGateway:
    if config.payment_gateway == "sandbox":
        if not config.sandbox_secret:
            logger.error("PAYMENT_GATEWAY=sandbox requires PAYMENT_SANDBOX_SECRET; payments are disabled")
            return UnconfiguredGateway("Sandbox gateway secret is not configured")
        logger.warning("Using the local sandbox gateway; payments are not real")
        return LocalSandboxGateway(secret=config.sandbox_secret)
    if config.payment_gateway != "razorpay":
        logger.error("Unknown PAYMENT_GATEWAY %r; payments are disabled", config.payment_gateway)
        return UnconfiguredGateway(f"Unknown payment gateway {config.payment_gateway!r}")
    if not config.gateway_configured:
        logger.error("RAZORPAY_KEY_ID/RAZORPAY_KEY_SECRET are not set; payments are disabled")
        return UnconfiguredGateway()
    return RazorpayGateway(
        key_id=config.razorpay_key_id or "",
        key_secret=config.razorpay_key_secret or "",
        timeout=config.gateway_timeout,
    )


def _build_notifier(config: CheckoutConfig) -> PaymentWebhookNotifier:
    if config.webhook_url:
        return HttpWebhookNotifier(config.webhook_url, timeout=config.webhook_timeout)
    return LoggingWebhookNotifier()


@lru_cache(maxsize=1)
def get_checkout_service() -> CheckoutService:
    config = get_checkout_config()
    return CheckoutService(
        gateway=_build_gateway(config),
        offers=get_offer_engine(),
        contracts=get_contract_service(),
        notifier=_build_notifier(config),
        currency=config.currency,
        domestic_country=config.domestic_country,
    )


__all__ = [
    "get_checkout_config",
    "get_checkout_service",
    "get_contract_service",
    "get_offer_admin_service",
    "get_offer_engine",
    "get_offer_repository",
]
