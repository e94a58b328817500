"""API routes exposing the plan catalog."""
from __future__ import annotations

from fastapi import APIRouter

from ..catalog import list_plans
from ..schemas.checkout import PlanListResponse, PlanResponse

router = APIRouter(prefix="/api/plans", tags=["plans"])


@router.get("", response_model=PlanListResponse)
def get_plans() -> PlanListResponse:
    return PlanListResponse(plans=[PlanResponse.from_definition(plan) for plan in list_plans()])
