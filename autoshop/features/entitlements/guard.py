"""
autoshop/features/entitlements/guard.py

Tenant-level gating on top of the entitlement engine.

Handles:
- Effective plan resolution for a tenant (override > tenant record > free)
- Access decisions and hard checks that raise typed errors
- Permission checks against the external tenant store (fail closed)
"""

import functools
import logging
from typing import Callable, Optional, Tuple, TypeVar, Union

from autoshop.core.config import settings
from autoshop.core.errors import (
    FeatureLockedError,
    QuotaExceededError,
    TenantUnavailableError,
    ValidationError,
)
from autoshop.core.logging import log_feature_locked, log_limit_reached
from autoshop.features.entitlements.service import (
    format_storage_size,
    get_minimum_plan_for_feature,
    get_plan_limits,
    get_upgrade_message,
    has_access,
    is_within_appointment_limit,
    is_within_storage_limit,
    is_within_vehicle_limit,
    normalize_plan,
)
from autoshop.models.entitlement import AccessDecision, TenantRecord
from autoshop.models.plan import Feature, PlanTier


logger = logging.getLogger(__name__)

TenantLookup = Callable[[str], Optional[TenantRecord]]
T = TypeVar("T")

_LIMIT_CHECKS = {
    "appointments": is_within_appointment_limit,
    "vehicles": is_within_vehicle_limit,
    "storage": is_within_storage_limit,
}


def resolve_effective_plan(tenant: Optional[TenantRecord], override: Optional[str] = None) -> PlanTier:
    """Explicit override first, then the tenant's plan, then free."""
    raw = override or (tenant.subscription_plan if tenant else None) or PlanTier.FREE.value
    return normalize_plan(raw)


def _coerce_feature(feature: Union[Feature, str]) -> Feature:
    try:
        return Feature(feature)
    except ValueError:
        raise ValidationError(f"Unknown feature: {feature}", details={"feature": str(feature)})


def check_feature(plan: Optional[str], feature: Union[Feature, str]) -> AccessDecision:
    """Access decision for a plan/feature pair (never raises for unknown plans)."""
    known = _coerce_feature(feature)
    tier = normalize_plan(plan)
    allowed = has_access(tier, known)
    return AccessDecision(
        plan=tier,
        feature=known,
        allowed=allowed,
        required_plan=get_minimum_plan_for_feature(known),
        upgrade_message=None if allowed else get_upgrade_message(known),
    )


def require_feature(
    plan: Optional[str],
    feature: Union[Feature, str],
    *,
    tenant_id: Optional[str] = None,
) -> AccessDecision:
    """Return the decision if allowed, otherwise raise FeatureLockedError."""
    decision = check_feature(plan, feature)
    if decision.allowed:
        return decision
    raise _locked(decision.plan, decision.feature, tenant_id)


def _locked(plan: PlanTier, feature: Feature, tenant_id: Optional[str]) -> FeatureLockedError:
    required = get_minimum_plan_for_feature(feature)
    if settings.AUDIT_LOCKED_FEATURES:
        log_feature_locked(feature.value, plan.value, required.value, tenant_id=tenant_id)
    return FeatureLockedError(
        get_upgrade_message(feature),
        feature=feature.value,
        plan=plan.value,
        required_plan=required.value,
    )


def require_within_limit(plan: Union[PlanTier, str], resource: str, used: int) -> None:
    """Raise QuotaExceededError when `used` does not fit the plan's limit for resource."""
    check = _LIMIT_CHECKS.get(resource)
    if check is None:
        raise ValidationError(f"Unknown resource: {resource}", details={"resource": resource})

    tier = normalize_plan(plan)
    if check(tier, used):
        return

    limits = get_plan_limits(tier)
    limit = limits.storage_bytes if resource == "storage" else getattr(limits, resource)
    shown = format_storage_size(limit) if resource == "storage" else str(limit)
    log_limit_reached(tier.value, resource, used, limit)
    raise QuotaExceededError(
        f"The {tier.value} plan allows {shown} {resource}.",
        details={"plan": tier.value, "resource": resource, "limit": limit, "used": used},
    )


def _lookup_plan(lookup: TenantLookup, tenant_id: str, feature: Union[Feature, str]) -> Optional[PlanTier]:
    """Tenant's effective plan, or None when the tenant is missing or the store fails."""
    try:
        tenant = lookup(tenant_id)
    except Exception:
        logger.error(
            "[entitlements] tenant lookup failed, denying",
            exc_info=True,
            extra={"tenant_id": tenant_id, "feature": str(feature)},
        )
        return None

    if tenant is None:
        logger.warning(
            "[entitlements] tenant not found, denying",
            extra={"tenant_id": tenant_id, "feature": str(feature)},
        )
        return None
    return resolve_effective_plan(tenant)


def check_tenant_permission(
    lookup: TenantLookup,
    tenant_id: str,
    feature: Union[Feature, str],
) -> Tuple[bool, PlanTier]:
    """
    Resolve the tenant's plan through the external store and check a feature.

    Returns:
        (has_permission, plan). Missing tenants and store failures deny with free.
    """
    plan = _lookup_plan(lookup, tenant_id, feature)
    if plan is None:
        return False, PlanTier.FREE
    return has_access(plan, feature), plan


def plan_restricted(feature: Union[Feature, str], lookup: TenantLookup):
    """Decorator: run the handler only if the tenant (first argument) has the feature.

    Raises TenantUnavailableError when the tenant's plan cannot be resolved and
    FeatureLockedError when the resolved plan is below the feature's tier.
    """
    known = _coerce_feature(feature)

    def decorator(handler: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(handler)
        def wrapper(tenant_id: str, *args, **kwargs) -> T:
            plan = _lookup_plan(lookup, tenant_id, known)
            if plan is None:
                raise TenantUnavailableError(
                    "This feature requires an active subscription plan.",
                    details={"tenant_id": tenant_id, "feature": known.value},
                )
            if not has_access(plan, known):
                raise _locked(plan, known, tenant_id)
            return handler(tenant_id, *args, **kwargs)
        return wrapper

    return decorator
