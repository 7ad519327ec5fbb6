"""
Plan catalog API routes.

- GET /v1/plans: Catalog with relation to the caller's current plan
- GET /v1/plans/{plan}/limits: Limits for a known tier
- GET /v1/plans/{plan}/features: Features unlocked by a plan
"""
from typing import List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from autoshop.core.errors import NotFoundError
from autoshop.features.entitlements.service import (
    format_storage_size,
    get_plan_features,
    get_plan_limits,
    normalize_plan,
)
from autoshop.features.plans.service import get_plan_catalog
from autoshop.models.entitlement import PlanOffer
from autoshop.models.plan import Feature, PlanTier


router = APIRouter(prefix="/v1/plans", tags=["plans"])


class PlanLimitsResponse(BaseModel):
    plan: PlanTier
    appointments: int
    vehicles: int
    storage_bytes: int
    storage_display: str


class PlanFeaturesResponse(BaseModel):
    plan: PlanTier
    features: List[Feature]


@router.get("", response_model=List[PlanOffer])
def list_plans(current_plan: Optional[str] = Query(None)):
    """Every tier in order. Unknown current_plan values are treated as free."""
    return get_plan_catalog(current_plan)


@router.get("/{plan}/limits", response_model=PlanLimitsResponse)
def plan_limits(plan: str):
    """
    Limits for an exact tier id.

    Errors:
        404: plan is not one of free, starter, pro, enterprise
    """
    try:
        tier = PlanTier(plan)
    except ValueError:
        raise NotFoundError(f"Plan {plan} not found")
    limits = get_plan_limits(tier)
    return PlanLimitsResponse(
        plan=tier,
        appointments=limits.appointments,
        vehicles=limits.vehicles,
        storage_bytes=limits.storage_bytes,
        storage_display=format_storage_size(limits.storage_bytes),
    )


@router.get("/{plan}/features", response_model=PlanFeaturesResponse)
def plan_features(plan: str):
    return PlanFeaturesResponse(plan=normalize_plan(plan), features=get_plan_features(plan))
