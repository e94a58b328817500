"""API route redeeming signed thank-you links."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from ..contracts import ContractError
from ..services.checkout import get_contract_service

router = APIRouter(prefix="/api/thank-you", tags=["thank-you"])


@router.get("/contract")
def get_thank_you_contract(
    version: Optional[str] = Query(None),
    order_id: Optional[str] = Query(None),
    payment_id: Optional[str] = Query(None),
    ts: Optional[str] = Query(None),
    sig: Optional[str] = Query(None),
) -> JSONResponse:
    service = get_contract_service()
    try:
        contract = service.verify(
            version=version,
            order_id=order_id,
            payment_id=payment_id,
            timestamp=ts,
            signature=sig,
        )
    except ContractError as exc:
        return JSONResponse(status_code=exc.status_code, content=dict(exc.payload))
    return JSONResponse(content=contract.model_dump(mode="json", by_alias=True))
