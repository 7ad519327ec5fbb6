"""
autoshop/features/entitlements/service.py

Plan entitlement engine.

Handles:
- Plan normalization (unknown plan strings fall back to free)
- Feature access checks against the availability table
- Minimum plan lookup and upgrade messaging
- Usage limit checks (-1 = unlimited)

Every function here is pure. The tables are read-only module constants.
"""

import logging
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple, Union

from autoshop.models.plan import (
    PLAN_ORDER,
    UNLIMITED,
    Feature,
    PlanLimits,
    PlanTier,
)


logger = logging.getLogger(__name__)

# Only the lowest unlocking tier is stored; every higher tier inherits the
# feature, so the unlocked set is always a suffix of PLAN_ORDER.
FEATURE_MINIMUM_PLAN: Mapping[Feature, PlanTier] = MappingProxyType({
    Feature.APPOINTMENT: PlanTier.FREE,
    Feature.QUOTATIONS: PlanTier.FREE,
    Feature.CHAT: PlanTier.STARTER,
    Feature.SMS: PlanTier.STARTER,
    Feature.FILE_UPLOAD_CHAT: PlanTier.STARTER,
    Feature.CUSTOM_BRANDING_BASIC: PlanTier.STARTER,
    Feature.INVENTORY: PlanTier.PRO,
    Feature.MULTIPLE_WORKSHOPS: PlanTier.PRO,
    Feature.CUSTOM_BRANDING_FULL: PlanTier.PRO,
    Feature.API_ACCESS: PlanTier.ENTERPRISE,
    Feature.ADVANCED_ANALYTICS: PlanTier.ENTERPRISE,
})

PLAN_FEATURES: Mapping[Feature, Tuple[PlanTier, ...]] = MappingProxyType({
    feature: PLAN_ORDER[minimum.rank:]
    for feature, minimum in FEATURE_MINIMUM_PLAN.items()
})

MIB = 1024 * 1024
GIB = 1024 * MIB

PLAN_LIMITS: Mapping[PlanTier, PlanLimits] = MappingProxyType({
    PlanTier.FREE: PlanLimits(appointments=20, vehicles=5, storage_bytes=100 * MIB),
    PlanTier.STARTER: PlanLimits(appointments=50, vehicles=10, storage_bytes=1 * GIB),
    PlanTier.PRO: PlanLimits(appointments=200, vehicles=50, storage_bytes=10 * GIB),
    PlanTier.ENTERPRISE: PlanLimits(
        appointments=UNLIMITED,  # unlimited
        vehicles=UNLIMITED,
        storage_bytes=UNLIMITED,
    ),
})

_PLANS_BY_VALUE = {tier.value: tier for tier in PLAN_ORDER}
_FEATURES_BY_VALUE = {feature.value: feature for feature in Feature}

_STORAGE_UNITS = ("B", "KB", "MB", "GB")


def normalize_plan(raw: Optional[str]) -> PlanTier:
    """Map a raw plan identifier to a PlanTier.

    Matching is exact (no case folding or trimming). Anything that is not one
    of the four tier ids, including None and "", resolves to free.
    """
    if isinstance(raw, PlanTier):
        return raw
    if not isinstance(raw, str):
        return PlanTier.FREE
    return _PLANS_BY_VALUE.get(raw, PlanTier.FREE)


def _lookup_feature(feature: Union[Feature, str]) -> Optional[Feature]:
    if isinstance(feature, Feature):
        return feature
    if isinstance(feature, str):
        return _FEATURES_BY_VALUE.get(feature)
    return None


def has_access(plan: Optional[str], feature: Union[Feature, str]) -> bool:
    """Return True if the (normalized) plan unlocks the feature.

    Unknown feature keys fail closed.
    """
    tier = normalize_plan(plan)
    known = _lookup_feature(feature)
    if known is None:
        logger.warning(
            "[entitlements] unknown feature, denying access",
            extra={"feature": feature, "plan": tier.value},
        )
        return False
    return tier in PLAN_FEATURES[known]


def get_minimum_plan_for_feature(feature: Union[Feature, str]) -> PlanTier:
    """Lowest tier that unlocks the feature.

    Raises:
        ValueError: If feature is not a Feature value
    """
    return PLAN_FEATURES[Feature(feature)][0]


def get_upgrade_message(feature: Union[Feature, str]) -> str:
    minimum = get_minimum_plan_for_feature(feature)
    return f"This feature is available starting from the {minimum.value} plan."


def get_plan_features(plan: Optional[str]) -> List[Feature]:
    """All features unlocked by the normalized plan, in declaration order."""
    tier = normalize_plan(plan)
    return [feature for feature in Feature if tier in PLAN_FEATURES[feature]]


def get_newly_unlocked_features(plan: Union[PlanTier, str]) -> List[Feature]:
    """Features whose minimum tier is exactly `plan`."""
    tier = PlanTier(plan)
    return [feature for feature in Feature if FEATURE_MINIMUM_PLAN[feature] is tier]


def get_plan_limits(plan: Union[PlanTier, str]) -> PlanLimits:
    """Limits for a known tier. No normalization: callers pass a valid tier."""
    return PLAN_LIMITS[PlanTier(plan)]


def is_unlimited(limit: int) -> bool:
    return limit == UNLIMITED


def is_within_appointment_limit(plan: Union[PlanTier, str], used_count: int) -> bool:
    """True while one more appointment can be created (strict comparison)."""
    limit = get_plan_limits(plan).appointments
    if is_unlimited(limit):
        return True
    return used_count < limit


def is_within_vehicle_limit(plan: Union[PlanTier, str], count: int) -> bool:
    """True while one more vehicle can be added (strict comparison)."""
    limit = get_plan_limits(plan).vehicles
    if is_unlimited(limit):
        return True
    return count < limit


def is_within_storage_limit(plan: Union[PlanTier, str], used_bytes: int) -> bool:
    """True while stored bytes fit the budget (the limit itself is allowed)."""
    limit = get_plan_limits(plan).storage_bytes
    if is_unlimited(limit):
        return True
    return used_bytes <= limit


def format_storage_size(num_bytes: int) -> str:
    """Human readable size, binary units, one decimal place.

    format_storage_size(1572864) -> "1.5 MB"
    """
    if num_bytes == UNLIMITED:
        return "Unlimited"
    if num_bytes == 0:
        return "0 B"

    value = float(num_bytes)
    unit_index = 0
    while abs(value) >= 1024 and unit_index < len(_STORAGE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.1f} {_STORAGE_UNITS[unit_index]}"
