"""Checkout orchestration and its external collaborators."""

from .gateway import (
    GatewayError,
    GatewayNotConfigured,
    GatewayOrder,
    InvalidGatewaySignature,
    LocalSandboxGateway,
    PaymentGateway,
    RazorpayGateway,
    UnconfiguredGateway,
    compute_callback_signature,
)
from .models import CheckoutResult, Customer, OfferOutcome, PaymentVerification, PricedSelection, VerifiedPayment
from .notifier import HttpWebhookNotifier, LoggingWebhookNotifier, PaymentWebhookNotifier
from .service import CheckoutError, CheckoutService

__all__ = [
    "CheckoutError",
    "CheckoutResult",
    "CheckoutService",
    "Customer",
    "GatewayError",
    "GatewayNotConfigured",
    "GatewayOrder",
    "HttpWebhookNotifier",
    "InvalidGatewaySignature",
    "LocalSandboxGateway",
    "LoggingWebhookNotifier",
    "OfferOutcome",
    "PaymentGateway",
    "PaymentVerification",
    "PaymentWebhookNotifier",
    "PricedSelection",
    "RazorpayGateway",
    "UnconfiguredGateway",
    "VerifiedPayment",
    "compute_callback_signature",
]
