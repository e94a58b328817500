"""API routes for coupon previews and offer administration."""
from __future__ import annotations

import hmac
from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Response, status

from ..offers import OfferNotFound, OfferStoreError, OfferValidationError
from ..schemas.offers import (
    EnterprisePreviewRequest,
    OfferCreateRequest,
    OfferListResponse,
    OfferPreviewRequest,
    OfferPreviewResponse,
    OfferResponse,
    StarterProPreviewRequest,
)
from ..services.checkout import get_checkout_config, get_checkout_service, get_offer_admin_service

router = APIRouter(prefix="/api/offers", tags=["offers"])
admin_router = APIRouter(prefix="/api/admin/offers", tags=["admin"])


def require_admin(x_admin_secret: Optional[str] = Header(None, alias="x-admin-secret")) -> None:
    expected = get_checkout_config().admin_secret
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access is not configured",
        )
    if not x_admin_secret or not hmac.compare_digest(x_admin_secret.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.post("/preview", response_model=OfferPreviewResponse)
def preview_offer(payload: Annotated[OfferPreviewRequest, Body(discriminator="segment")]) -> OfferPreviewResponse:
    service = get_checkout_service()
    try:
        if isinstance(payload, EnterprisePreviewRequest):
            selection = service.price_enterprise(
                package=payload.package,
                billing_cadence=payload.billing_cadence,
                country=payload.country,
                coupon_code=payload.coupon_code,
            )
        elif isinstance(payload, StarterProPreviewRequest):
            selection = service.price_starter_pro(
                plan=payload.plan,
                billing_cadence=payload.billing_cadence,
                country=payload.country,
                coupon_code=payload.coupon_code,
            )
        else:
            selection = service.price_one_time(
                plan_id=payload.plan_id,
                custom_base=payload.custom_base,
                coupon_code=payload.coupon_code,
                country=payload.country,
            )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return OfferPreviewResponse.from_selection(selection, service.currency)


@admin_router.get("", response_model=OfferListResponse, dependencies=[Depends(require_admin)])
def list_offers() -> OfferListResponse:
    service = get_offer_admin_service()
    try:
        offers = service.list_offers()
    except OfferStoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return OfferListResponse(offers=list(offers))


@admin_router.post(
    "",
    response_model=OfferResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_offer(payload: OfferCreateRequest) -> OfferResponse:
    service = get_offer_admin_service()
    try:
        offer = service.create_offer(
            code=payload.code,
            discount_type=payload.discount_type,
            amount=payload.amount,
            plans=payload.applies_to.plans,
            billing_types=payload.applies_to.billing_types,
            countries=payload.applies_to.countries,
            plan_cadences=payload.applies_to.plan_cadences,
            usage_limit=payload.usage_limit,
            start=payload.validity.start,
            end=payload.validity.end,
            active=payload.active,
        )
    except OfferValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except OfferStoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return OfferResponse(offer=offer)


def _set_active(code: str, active: bool) -> OfferResponse:
    service = get_offer_admin_service()
    try:
        offer = service.set_active(code, active)
    except OfferNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except OfferStoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return OfferResponse(offer=offer)


@admin_router.post("/{code}/enable", response_model=OfferResponse, dependencies=[Depends(require_admin)])
def enable_offer(code: str) -> OfferResponse:
    return _set_active(code, True)


@admin_router.post("/{code}/disable", response_model=OfferResponse, dependencies=[Depends(require_admin)])
def disable_offer(code: str) -> OfferResponse:
    return _set_active(code, False)


@admin_router.delete("/{code}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
def delete_offer(code: str) -> Response:
    service = get_offer_admin_service()
    try:
        service.delete_offer(code)
    except OfferNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except OfferStoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
