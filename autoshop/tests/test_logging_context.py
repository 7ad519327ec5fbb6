"""Tests for structured logging and request_id propagation."""

import json
import logging

from autoshop.core.logging import (
    MAX_VALUE_LENGTH,
    JsonFormatter,
    PrettyFormatter,
    log_event,
    log_feature_locked,
    log_limit_reached,
)


def test_request_id_in_response_and_logs(client, caplog):
    with caplog.at_level(logging.INFO, logger="autoshop"):
        response = client.get("/healthz")
    rid = response.headers.get("x-request-id")
    assert rid
    records = [r for r in caplog.records if getattr(r, "request_id", None) == rid]
    assert records, "Expected logs to contain request_id from response"


def test_locked_feature_log_shares_request_id(client, caplog):
    with caplog.at_level(logging.INFO, logger="autoshop"):
        response = client.post("/v1/entitlements/require", json={"plan": "free", "feature": "chat"})
    rid = response.headers["x-request-id"]
    locked = [r for r in caplog.records if r.getMessage() == "feature.locked"]
    assert locked
    assert locked[0].request_id == rid


def test_quota_log_shares_request_id(client, caplog):
    with caplog.at_level(logging.INFO, logger="autoshop"):
        response = client.post("/v1/usage/check", json={"plan": "free", "resource": "appointments", "used": 25})
    assert response.status_code == 403
    reached = [r for r in caplog.records if r.getMessage() == "usage.limit_reached"]
    assert reached
    assert reached[0].request_id == response.headers["x-request-id"]


def _record(msg="feature.locked", **extra):
    record = logging.LogRecord("autoshop", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_entitlement_fields():
    payload = json.loads(JsonFormatter().format(_record(request_id="r1", feature="chat", plan="free")))
    assert payload["event"] == "feature.locked"
    assert payload["level"] == "info"
    assert payload["request_id"] == "r1"
    assert payload["feature"] == "chat"
    assert payload["plan"] == "free"
    assert "tenant_id" not in payload


def test_pretty_formatter_appends_fields():
    line = PrettyFormatter().format(_record(request_id="r2", plan="free", required_plan="pro"))
    assert line.startswith("INFO [autoshop] [rid=r2] feature.locked")
    assert line.endswith("plan=free required_plan=pro")


def test_log_event_clips_long_values(caplog):
    with caplog.at_level(logging.INFO, logger="autoshop"):
        log_event("info", "note", extra={"resource": "x" * 500, "used": 7})
    record = [r for r in caplog.records if r.getMessage() == "note"][0]
    assert len(record.resource) == MAX_VALUE_LENGTH + 3
    assert record.resource.endswith("...")
    assert record.used == 7


def test_feature_locked_event(caplog):
    with caplog.at_level(logging.INFO, logger="autoshop"):
        log_feature_locked("inventory", "starter", "pro", tenant_id="shop-1")
    record = [r for r in caplog.records if r.getMessage() == "feature.locked"][0]
    assert record.levelname == "INFO"
    assert record.event_type == "feature_locked_attempt"
    assert record.tenant_id == "shop-1"
    assert (record.feature, record.plan, record.required_plan) == ("inventory", "starter", "pro")


def test_limit_reached_event(caplog):
    with caplog.at_level(logging.INFO, logger="autoshop"):
        log_limit_reached("free", "storage", 2048, 1024)
    record = [r for r in caplog.records if r.getMessage() == "usage.limit_reached"][0]
    assert record.levelname == "WARNING"
    assert record.event_type == "limit_reached"
    assert (record.resource, record.used, record.limit) == ("storage", 2048, 1024)
