"""
autoshop/models/entitlement.py

Entitlement decision and tenant models.
"""

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from autoshop.models.plan import Feature, PlanLimits, PlanTier


class TenantRecord(BaseModel):
    """
    Tenant row as returned by the external store.

    subscription_plan is free text there; it is normalized before any check.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    subscription_plan: Optional[str] = None


class AccessDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    plan: PlanTier
    feature: Feature
    allowed: bool
    required_plan: PlanTier
    upgrade_message: Optional[str] = None


class PlanDetails(BaseModel):
    """Marketing metadata for a tier (what the plan picker shows)."""
    model_config = ConfigDict(frozen=True)

    tier: PlanTier
    name: str
    price_label: str
    description: str
    highlights: Tuple[str, ...]


PlanRelation = Literal["current", "upgrade", "downgrade"]


class PlanOffer(BaseModel):
    model_config = ConfigDict(frozen=True)

    details: PlanDetails
    limits: PlanLimits
    relation: PlanRelation


class UpgradePrompt(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    message: str
    feature: Feature
    current_plan: PlanTier
    required_plan: PlanTier
    cta_label: str
    upgrade_url: Optional[str] = None
