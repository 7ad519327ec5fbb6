"""
Logging for the entitlements service.

Every record under the "autoshop" logger is stamped with the current
request id. Entitlement denials go through two named events so they can be
counted per plan and feature:

- feature.locked: a plan tried to use a feature above its tier
- usage.limit_reached: a hard limit check failed

Production emits one JSON object per line, other environments a readable
line with the entitlement fields appended as key=value pairs.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOGGER_NAME = "autoshop"

request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Record attributes rendered by both formatters, in output order
ENTITLEMENT_FIELDS = (
    "event_type",
    "tenant_id",
    "plan",
    "feature",
    "required_plan",
    "resource",
    "used",
    "limit",
    "error_code",
)

MAX_VALUE_LENGTH = 200


def get_request_id(default: Optional[str] = None) -> Optional[str]:
    rid = request_id_ctx_var.get()
    return rid if rid is not None else default


def _fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        name: getattr(record, name)
        for name in ENTITLEMENT_FIELDS
        if getattr(record, name, None) is not None
    }


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update(_fields(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class PrettyFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        rid = getattr(record, "request_id", None)
        parts = [record.levelname, f"[{LOGGER_NAME}]"]
        if rid:
            parts.append(f"[rid={rid}]")
        parts.append(record.getMessage())
        parts.extend(f"{key}={value}" for key, value in _fields(record).items())
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(env: str = "development") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if env.lower() == "production" else PrettyFormatter())
    handler.addFilter(RequestIdFilter())

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    logger.handlers = [handler]


def _clip(value: Any) -> Any:
    if isinstance(value, (bool, int, float)) or value is None:
        return value
    text = str(value)
    if len(text) > MAX_VALUE_LENGTH:
        return text[:MAX_VALUE_LENGTH] + "..."
    return text


def log_event(
    level: str,
    msg: str,
    *,
    request_id: Optional[str] = None,
    tenant_id: Optional[str] = None,
    event_type: Optional[str] = None,
    error_code: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Log `msg` on the service logger with entitlement fields attached.

    Values in `extra` are clipped to MAX_VALUE_LENGTH characters; numbers and
    booleans pass through unchanged.
    """
    fields: Dict[str, Any] = {
        "request_id": request_id or get_request_id(),
        "tenant_id": tenant_id,
        "event_type": event_type,
        "error_code": error_code,
    }
    for key, value in (extra or {}).items():
        fields[key] = _clip(value)
    logger = logging.getLogger(LOGGER_NAME)
    logger.log(logging.getLevelName(level.upper()), msg, extra=fields)


def log_feature_locked(
    feature: str,
    plan: str,
    required_plan: str,
    *,
    tenant_id: Optional[str] = None,
) -> None:
    log_event(
        "info",
        "feature.locked",
        tenant_id=tenant_id,
        event_type="feature_locked_attempt",
        extra={"feature": feature, "plan": plan, "required_plan": required_plan},
    )


def log_limit_reached(
    plan: str,
    resource: str,
    used: int,
    limit: int,
    *,
    tenant_id: Optional[str] = None,
) -> None:
    log_event(
        "warning",
        "usage.limit_reached",
        tenant_id=tenant_id,
        event_type="limit_reached",
        extra={"plan": plan, "resource": resource, "used": used, "limit": limit},
    )
