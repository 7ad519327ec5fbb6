"""Tests for normalized error responses."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from autoshop.core.errors import (
    AppError,
    FeatureLockedError,
    QuotaExceededError,
    TenantUnavailableError,
    app_error_handler,
)
from autoshop.core.middleware.request_id import RequestIdMiddleware


def test_feature_locked_error_contract():
    error = FeatureLockedError(
        "This feature is available starting from the pro plan.",
        feature="inventory",
        plan="starter",
        required_plan="pro",
    )
    assert error.status_code == 403
    assert error.code == "upgrade_required"
    assert error.details["required_plan"] == "pro"


def test_quota_exceeded_error_contract():
    error = QuotaExceededError("Test error")
    assert error.status_code == 403
    assert error.code == "quota_exceeded"
    assert error.details == {}


def test_tenant_unavailable_error_contract():
    error = TenantUnavailableError("This feature requires an active subscription plan.")
    assert error.status_code == 403
    assert error.code == "plan_unavailable"
    assert not isinstance(error, FeatureLockedError)


def test_code_and_status_overrides():
    error = AppError("boom", code="custom", status_code=418)
    assert error.code == "custom"
    assert error.status_code == 418


def test_app_error_has_standard_shape():
    test_app = FastAPI()
    test_app.add_middleware(RequestIdMiddleware)
    test_app.add_exception_handler(AppError, app_error_handler)

    @test_app.get("/boom")
    async def boom():
        raise QuotaExceededError("over", details={"resource": "vehicles"})

    client = TestClient(test_app)
    resp = client.get("/boom", headers={"x-request-id": "rid-1"})
    assert resp.status_code == 403
    body = resp.json()
    assert body["detail"] == "over"
    assert body["error"] == {
        "code": "quota_exceeded",
        "message": "over",
        "request_id": "rid-1",
        "resource": "vehicles",
    }
    assert resp.headers["x-request-id"] == "rid-1"


def test_unknown_route_is_normalized(client):
    resp = client.get("/v1/nope")
    assert resp.status_code == 404
    body = resp.json()
    assert body["error"]["code"] == "not_found"
    assert body["error"]["request_id"] == resp.headers["x-request-id"]
