"""
autoshop/models/usage.py

Usage summary models (monthly usage against plan limits).
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from autoshop.models.plan import PlanTier


UsageStatus = Literal["ok", "approaching_limit", "at_limit", "unlimited"]
UsageResource = Literal["appointments", "vehicles", "storage"]


class UsageItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    resource: UsageResource
    used: int
    limit: int
    unlimited: bool
    percentage: Optional[float] = None
    status: UsageStatus
    used_display: Optional[str] = None
    limit_display: Optional[str] = None


class UsageSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    plan: PlanTier
    appointments: UsageItem
    storage: UsageItem
    vehicles: Optional[UsageItem] = None
    near_limit: bool
