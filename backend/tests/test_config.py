from __future__ import annotations

import pytest

from backend.app.config import load_checkout_config


def test_defaults() -> None:
    config = load_checkout_config({})

    assert config.domestic_country == "India"
    assert config.currency == "INR"
    assert config.currency_symbol == "₹"
    assert config.signing_secret is None
    assert config.contract_ttl_seconds == 1800
    assert config.link_max_age_seconds == 900
    assert config.offers_file == "data/offers.json"
    assert config.enforce_offer_audience is False
    assert config.payment_gateway == "razorpay"
    assert config.sandbox_secret is None
    assert config.gateway_configured is False
    assert config.webhook_url is None
    assert config.cors_allow_origins == ("http://localhost:5173",)


def test_overrides() -> None:
    config = load_checkout_config(
        {
            "CURRENCY": "usd",
            "THANK_YOU_URL": "https://shop.example.com/thanks/",
            "THANK_YOU_SIGNING_SECRET": "s3cret",
            "THANK_YOU_CONTRACT_TTL_SECONDS": "600",
            "OFFERS_ENFORCE_AUDIENCE": "yes",
            "RAZORPAY_KEY_ID": "rzp_live",
            "RAZORPAY_KEY_SECRET": "shh",
            "PAYMENT_GATEWAY": " Sandbox ",
            "PAYMENT_SANDBOX_SECRET": "local-only",
            "N8N_PAYMENT_WEBHOOK_URL": "https://hooks.example.com/pay",
            "CORS_ALLOW_ORIGINS": "https://a.example.com, https://b.example.com,",
        }
    )

    assert config.currency == "USD"
    assert config.thank_you_url == "https://shop.example.com/thanks"
    assert config.signing_secret == "s3cret"
    assert config.contract_ttl_seconds == 600
    assert config.enforce_offer_audience is True
    assert config.gateway_configured is True
    assert config.payment_gateway == "sandbox"
    assert config.sandbox_secret == "local-only"
    assert config.webhook_url == "https://hooks.example.com/pay"
    assert config.cors_allow_origins == ("https://a.example.com", "https://b.example.com")


def test_empty_secret_is_treated_as_missing() -> None:
    assert load_checkout_config({"THANK_YOU_SIGNING_SECRET": ""}).signing_secret is None


def test_invalid_integer_is_rejected() -> None:
    with pytest.raises(ValueError):
        load_checkout_config({"THANK_YOU_LINK_MAX_AGE_SECONDS": "fifteen"})
