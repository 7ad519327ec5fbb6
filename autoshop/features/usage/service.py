"""
autoshop/features/usage/service.py

Usage summary service.

Turns monthly usage figures (fetched by the caller from the tenant store)
into per-limit status for the usage dashboard.
"""

from typing import Optional

from autoshop.features.entitlements.service import (
    format_storage_size,
    get_plan_limits,
    is_unlimited,
    is_within_appointment_limit,
    is_within_vehicle_limit,
    normalize_plan,
)
from autoshop.models.plan import PlanTier
from autoshop.models.usage import UsageItem, UsageSummary


APPROACHING_LIMIT_PERCENT = 80.0


def usage_percentage(used: int, limit: int) -> Optional[float]:
    """Share of the limit in use, one decimal, capped at 100. None when unlimited."""
    if is_unlimited(limit):
        return None
    if limit <= 0:
        return 100.0
    return round(min(100.0, used / limit * 100), 1)


def _status(percentage: Optional[float], at_limit: bool) -> str:
    if percentage is None:
        return "unlimited"
    if at_limit:
        return "at_limit"
    if percentage >= APPROACHING_LIMIT_PERCENT:
        return "approaching_limit"
    return "ok"


def _count_item(resource: str, used: int, limit: int, within: bool) -> UsageItem:
    percentage = usage_percentage(used, limit)
    return UsageItem(
        resource=resource,
        used=used,
        limit=limit,
        unlimited=is_unlimited(limit),
        percentage=percentage,
        status=_status(percentage, not within),
    )


def _storage_item(used_bytes: int, limit: int) -> UsageItem:
    percentage = usage_percentage(used_bytes, limit)
    at_limit = not is_unlimited(limit) and used_bytes >= limit
    return UsageItem(
        resource="storage",
        used=used_bytes,
        limit=limit,
        unlimited=is_unlimited(limit),
        percentage=percentage,
        status=_status(percentage, at_limit),
        used_display=format_storage_size(used_bytes),
        limit_display=format_storage_size(limit),
    )


def get_usage_summary(
    plan: Optional[str],
    appointments_used: int,
    storage_used: int,
    vehicles_used: Optional[int] = None,
) -> UsageSummary:
    """
    Summarize usage against the plan's limits.

    Args:
        plan: Raw plan identifier (normalized, unknown -> free)
        appointments_used: Appointments created this month
        storage_used: Bytes currently stored
        vehicles_used: Registered vehicles, if the caller tracks them

    Returns:
        UsageSummary with one item per resource and a near_limit flag
    """
    tier: PlanTier = normalize_plan(plan)
    limits = get_plan_limits(tier)

    appointments = _count_item(
        "appointments",
        appointments_used,
        limits.appointments,
        is_within_appointment_limit(tier, appointments_used),
    )
    storage = _storage_item(storage_used, limits.storage_bytes)
    vehicles = None
    if vehicles_used is not None:
        vehicles = _count_item(
            "vehicles",
            vehicles_used,
            limits.vehicles,
            is_within_vehicle_limit(tier, vehicles_used),
        )

    items = [item for item in (appointments, storage, vehicles) if item is not None]
    near_limit = any(item.status in ("approaching_limit", "at_limit") for item in items)

    return UsageSummary(
        plan=tier,
        appointments=appointments,
        storage=storage,
        vehicles=vehicles,
        near_limit=near_limit,
    )
