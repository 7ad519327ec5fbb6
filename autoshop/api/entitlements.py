"""
Entitlement API routes.

- GET  /v1/entitlements/check: Access decision for plan + feature
- GET  /v1/entitlements/features/{feature}: Minimum plan and upgrade prompt
- POST /v1/entitlements/require: Hard check (403 upgrade_required when locked)
"""
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from autoshop.features.entitlements.guard import check_feature, require_feature
from autoshop.features.plans.service import get_upgrade_prompt
from autoshop.models.entitlement import AccessDecision, UpgradePrompt
from autoshop.models.plan import Feature


router = APIRouter(prefix="/v1/entitlements", tags=["entitlements"])


class RequireFeatureRequest(BaseModel):
    plan: Optional[str] = None
    feature: str
    tenant_id: Optional[str] = None


class RequireFeatureResponse(BaseModel):
    allowed: bool
    plan: str


@router.get("/check", response_model=AccessDecision)
async def check(feature: str = Query(...), plan: Optional[str] = Query(None)):
    """
    Access decision for a raw plan string.

    Errors:
        400: Unknown feature
    """
    return check_feature(plan, feature)


@router.get("/features/{feature}", response_model=UpgradePrompt)
async def feature_prompt(feature: Feature, current_plan: Optional[str] = Query(None)):
    return get_upgrade_prompt(feature, current_plan)


@router.post("/require", response_model=RequireFeatureResponse)
async def require(request: RequireFeatureRequest):
    """
    Errors:
        400: Unknown feature
        403: upgrade_required (body carries required_plan and the upgrade message)
    """
    decision = require_feature(request.plan, request.feature, tenant_id=request.tenant_id)
    return RequireFeatureResponse(allowed=True, plan=decision.plan.value)
