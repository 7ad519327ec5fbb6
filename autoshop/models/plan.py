"""
autoshop/models/plan.py

Plan tier, feature and limit models.

Tiers and features are closed enumerations. Raw plan strings coming from
tenant records are converted to PlanTier only through
features.entitlements.service.normalize_plan.
"""

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict


UNLIMITED = -1


class PlanTier(str, Enum):
    """Subscription tier, ordered by capability (free < starter < pro < enterprise)."""
    FREE = "free"
    STARTER = "starter"
    PRO = "pro"
    ENTERPRISE = "enterprise"

    @property
    def rank(self) -> int:
        return PLAN_ORDER.index(self)

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def __str__(self) -> str:
        return self.value


class Feature(str, Enum):
    """Capability gated by plan tier."""
    APPOINTMENT = "appointment"
    CHAT = "chat"
    SMS = "sms"
    FILE_UPLOAD_CHAT = "file_upload_chat"
    INVENTORY = "inventory"
    API_ACCESS = "api_access"
    QUOTATIONS = "quotations"
    MULTIPLE_WORKSHOPS = "multiple_workshops"
    ADVANCED_ANALYTICS = "advanced_analytics"
    CUSTOM_BRANDING_BASIC = "custom_branding_basic"
    CUSTOM_BRANDING_FULL = "custom_branding_full"

    def __str__(self) -> str:
        return self.value


PLAN_ORDER: Tuple[PlanTier, ...] = (
    PlanTier.FREE,
    PlanTier.STARTER,
    PlanTier.PRO,
    PlanTier.ENTERPRISE,
)


class PlanLimits(BaseModel):
    """
    Usage limits for a tier.

    A value of -1 (UNLIMITED) means the resource is not capped.
    """
    model_config = ConfigDict(frozen=True)

    appointments: int
    vehicles: int
    storage_bytes: int
