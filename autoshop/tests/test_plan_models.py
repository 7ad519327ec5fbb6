"""
Tests for plan, feature and tenant models.
"""
import pytest

from autoshop.models.entitlement import TenantRecord
from autoshop.models.plan import PLAN_ORDER, Feature, PlanLimits, PlanTier


def test_plan_order_and_rank():
    assert [t.value for t in PLAN_ORDER] == ["free", "starter", "pro", "enterprise"]
    assert [t.rank for t in PLAN_ORDER] == [0, 1, 2, 3]


def test_display_names():
    assert [t.display_name for t in PLAN_ORDER] == ["Free", "Starter", "Pro", "Enterprise"]


def test_enum_members_equal_raw_values():
    assert PlanTier.PRO == "pro"
    assert Feature.FILE_UPLOAD_CHAT == "file_upload_chat"
    assert str(PlanTier.STARTER) == "starter"


def test_feature_set_is_closed():
    assert len(Feature) == 11
    with pytest.raises(ValueError):
        Feature("custom_branding")


def test_plan_limits_frozen():
    limits = PlanLimits(appointments=1, vehicles=1, storage_bytes=1)
    with pytest.raises(Exception):
        limits.vehicles = 2


def test_tenant_record_optional_plan():
    tenant = TenantRecord(id="shop-1")
    assert tenant.subscription_plan is None
    with pytest.raises(Exception):
        tenant.subscription_plan = "pro"
