"""
Health API for the entitlements service.

The service has no backing store, so liveness and readiness are the same.
"""

import logging
import time

from fastapi import APIRouter, Request

from autoshop.features.entitlements.service import PLAN_FEATURES, PLAN_LIMITS

logger = logging.getLogger("autoshop")

root_router = APIRouter(tags=["health"])


@root_router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok"}


@root_router.get("/readyz")
def readyz(request: Request):
    """Readiness: plan tables loaded, plus uptime."""
    started = getattr(request.app.state, "startup_time", None)
    uptime = round(time.time() - started, 3) if started else None
    return {
        "status": "ok",
        "features": len(PLAN_FEATURES),
        "plans": len(PLAN_LIMITS),
        "uptime_s": uptime,
    }
