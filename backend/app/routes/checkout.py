"""API routes creating gateway orders and verifying payments."""
from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, BackgroundTasks, HTTPException, status

from ..checkout import CheckoutResult, GatewayError, GatewayNotConfigured, InvalidGatewaySignature
from ..contracts import ContractError
from ..schemas.checkout import (
    CheckoutResponse,
    EnterpriseCheckoutRequest,
    OneTimeCheckoutRequest,
    StarterProCheckoutRequest,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from ..services.checkout import get_checkout_service

logger = logging.getLogger("checkout")

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


def _gateway_unavailable(exc: GatewayNotConfigured) -> HTTPException:
    logger.error("Payment request rejected: %s", exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Payment gateway is not configured",
    )


def _run_checkout(create: Callable[[], CheckoutResult]) -> CheckoutResponse:
    try:
        result = create()
    except GatewayNotConfigured as exc:
        raise _gateway_unavailable(exc) from exc
    except GatewayError as exc:
        logger.exception("Gateway order creation failed")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to create order",
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return CheckoutResponse.from_result(result)


@router.post("/enterprise", response_model=CheckoutResponse)
def create_enterprise_checkout(payload: EnterpriseCheckoutRequest) -> CheckoutResponse:
    service = get_checkout_service()
    return _run_checkout(
        lambda: service.create_enterprise_order(
            package=payload.package,
            billing_cadence=payload.billing_cadence,
            country=payload.country,
            coupon_code=payload.coupon_code,
            customer=payload.customer.to_customer(),
        )
    )


@router.post("/starter-pro", response_model=CheckoutResponse)
def create_starter_pro_checkout(payload: StarterProCheckoutRequest) -> CheckoutResponse:
    service = get_checkout_service()
    return _run_checkout(
        lambda: service.create_starter_pro_order(
            plan=payload.plan,
            billing_cadence=payload.billing_cadence,
            country=payload.country,
            coupon_code=payload.coupon_code,
            customer=payload.customer.to_customer(),
        )
    )


@router.post("/one-time", response_model=CheckoutResponse)
def create_one_time_checkout(payload: OneTimeCheckoutRequest) -> CheckoutResponse:
    service = get_checkout_service()
    return _run_checkout(
        lambda: service.create_one_time_order(
            plan_id=payload.plan_id,
            custom_base=payload.custom_base,
            coupon_code=payload.coupon_code,
            country=payload.country,
            customer=payload.customer.to_customer(),
        )
    )


@router.post("/verify", response_model=VerifyPaymentResponse)
def verify_payment(payload: VerifyPaymentRequest, background_tasks: BackgroundTasks) -> VerifyPaymentResponse:
    service = get_checkout_service()
    try:
        verified = service.verify_payment(
            order_id=payload.razorpay_order_id,
            payment_id=payload.razorpay_payment_id,
            signature=payload.razorpay_signature,
            fallback=payload.purchase,
            customer=payload.customer.to_customer(),
            meta=payload.meta,
        )
    except GatewayNotConfigured as exc:
        raise _gateway_unavailable(exc) from exc
    except InvalidGatewaySignature as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"success": False, "error": str(exc)},
        ) from exc
    except ContractError as exc:
        raise exc.to_http_exception() from exc

    background_tasks.add_task(service.dispatch_webhook, verified.webhook_payload)
    return VerifyPaymentResponse.from_verification(verified.result)
