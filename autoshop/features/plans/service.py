"""
autoshop/features/plans/service.py

Plan catalog service.

Handles:
- Display metadata per tier (name, price label, description, highlights)
- Upgrade / downgrade classification between tiers
- Upgrade prompts for locked features
"""

from types import MappingProxyType
from typing import List, Mapping, Optional, Union

from autoshop.core.config import settings
from autoshop.features.entitlements.service import (
    format_storage_size,
    get_minimum_plan_for_feature,
    get_newly_unlocked_features,
    get_plan_limits,
    get_upgrade_message,
    is_unlimited,
    normalize_plan,
)
from autoshop.models.entitlement import PlanDetails, PlanOffer, PlanRelation, UpgradePrompt
from autoshop.models.plan import PLAN_ORDER, Feature, PlanTier


FEATURE_LABELS: Mapping[Feature, str] = MappingProxyType({
    Feature.APPOINTMENT: "Online appointment booking",
    Feature.QUOTATIONS: "Quotations",
    Feature.CHAT: "Real-time chat",
    Feature.SMS: "SMS notifications",
    Feature.FILE_UPLOAD_CHAT: "File uploads in chat",
    Feature.CUSTOM_BRANDING_BASIC: "Basic branding (logo + colors)",
    Feature.INVENTORY: "Inventory management",
    Feature.MULTIPLE_WORKSHOPS: "Multi-workshop support",
    Feature.CUSTOM_BRANDING_FULL: "Full custom branding",
    Feature.API_ACCESS: "API access",
    Feature.ADVANCED_ANALYTICS: "Advanced analytics",
})

_PLAN_COPY = {
    PlanTier.FREE: ("$0", "Perfect for getting started"),
    PlanTier.STARTER: ("$29", "Great for small workshops"),
    PlanTier.PRO: ("$99", "Perfect for growing businesses"),
    PlanTier.ENTERPRISE: ("Custom", "For large organizations"),
}


def _limit_highlights(tier: PlanTier) -> List[str]:
    limits = get_plan_limits(tier)
    appointments = (
        "Unlimited appointments" if is_unlimited(limits.appointments)
        else f"{limits.appointments} appointments/month"
    )
    vehicles = (
        "Unlimited vehicles" if is_unlimited(limits.vehicles)
        else f"{limits.vehicles} vehicles"
    )
    storage = (
        "Unlimited storage" if is_unlimited(limits.storage_bytes)
        else f"{format_storage_size(limits.storage_bytes)} storage"
    )
    return [appointments, vehicles, storage]


def _build_details(tier: PlanTier) -> PlanDetails:
    price_label, description = _PLAN_COPY[tier]
    highlights = _limit_highlights(tier)
    if tier.rank > 0:
        highlights.append(f"Everything in {PLAN_ORDER[tier.rank - 1].display_name}")
    highlights.extend(FEATURE_LABELS[feature] for feature in get_newly_unlocked_features(tier))
    return PlanDetails(
        tier=tier,
        name=tier.display_name,
        price_label=price_label,
        description=description,
        highlights=tuple(highlights),
    )


PLAN_DETAILS: Mapping[PlanTier, PlanDetails] = MappingProxyType({
    tier: _build_details(tier) for tier in PLAN_ORDER
})


def get_plan_details(plan: Union[PlanTier, str]) -> PlanDetails:
    return PLAN_DETAILS[PlanTier(plan)]


def get_plan_relation(current: Optional[str], target: Optional[str]) -> PlanRelation:
    """Classify `target` relative to `current` (both normalized)."""
    current_tier = normalize_plan(current)
    target_tier = normalize_plan(target)
    if target_tier is current_tier:
        return "current"
    if target_tier.rank > current_tier.rank:
        return "upgrade"
    return "downgrade"


def get_plan_catalog(current_plan: Optional[str] = None) -> List[PlanOffer]:
    """Every tier in order, annotated with its relation to current_plan."""
    return [
        PlanOffer(
            details=PLAN_DETAILS[tier],
            limits=get_plan_limits(tier),
            relation=get_plan_relation(current_plan, tier.value),
        )
        for tier in PLAN_ORDER
    ]


def get_upgrade_prompt(feature: Union[Feature, str], current_plan: Optional[str]) -> UpgradePrompt:
    """Content of the upgrade dialog shown when a locked feature is opened."""
    required = get_minimum_plan_for_feature(feature)
    return UpgradePrompt(
        title="Upgrade Required",
        message=get_upgrade_message(feature),
        feature=Feature(feature),
        current_plan=normalize_plan(current_plan),
        required_plan=required,
        cta_label=f"Upgrade to {required.display_name}",
        upgrade_url=settings.UPGRADE_URL,
    )
