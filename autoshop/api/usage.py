"""
Usage API routes.

- POST /v1/usage/summary: Usage dashboard data for a plan
- POST /v1/usage/check: Hard limit check (403 quota_exceeded when over)
"""
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from autoshop.features.entitlements.guard import require_within_limit
from autoshop.features.usage.service import get_usage_summary
from autoshop.models.usage import UsageResource, UsageSummary


router = APIRouter(prefix="/v1/usage", tags=["usage"])


class UsageSummaryRequest(BaseModel):
    plan: Optional[str] = None
    appointments_used: int = 0
    storage_used: int = 0
    vehicles_used: Optional[int] = None


class UsageCheckRequest(BaseModel):
    plan: Optional[str] = None
    resource: UsageResource
    used: int


@router.post("/summary", response_model=UsageSummary)
async def summary(request: UsageSummaryRequest):
    return get_usage_summary(
        request.plan,
        appointments_used=request.appointments_used,
        storage_used=request.storage_used,
        vehicles_used=request.vehicles_used,
    )


@router.post("/check")
async def check(request: UsageCheckRequest):
    require_within_limit(request.plan, request.resource, request.used)
    return {"within_limit": True}
