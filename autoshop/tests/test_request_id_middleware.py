import logging

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from autoshop.core.logging import get_request_id
from autoshop.core.middleware.request_id import RequestIdMiddleware


def _make_app():
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)

    @app.get("/")
    async def root(request: Request):
        return {
            "request_id": getattr(request.state, "request_id", None),
            "context_request_id": get_request_id(),
        }

    return app


def test_generates_request_id_when_missing():
    client = TestClient(_make_app())

    resp = client.get("/")
    assert resp.status_code == 200
    rid_header = resp.headers.get("x-request-id")
    body = resp.json()

    assert rid_header
    assert body["request_id"] == rid_header
    assert body["context_request_id"] == rid_header


def test_echoes_provided_request_id():
    client = TestClient(_make_app())

    resp = client.get("/", headers={"X-Request-Id": "test-rid-123"})

    assert resp.status_code == 200
    assert resp.headers.get("x-request-id") == "test-rid-123"
    assert resp.json()["request_id"] == "test-rid-123"


def test_context_is_reset_after_request():
    client = TestClient(_make_app())
    client.get("/", headers={"X-Request-Id": "scoped-rid"})
    assert get_request_id() is None


def test_completion_log_carries_tenant(caplog):
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="autoshop"):
        client.get("/", headers={"X-Request-Id": "rid-t", "X-Tenant-Id": "shop-3"})
    records = [r for r in caplog.records if r.getMessage() == "request.complete"]
    assert records
    assert records[-1].tenant_id == "shop-3"
    assert records[-1].request_id == "rid-t"
