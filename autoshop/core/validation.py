"""
Environment validation utilities.

Ensures the service fails fast on misconfiguration while
remaining bypassable for tests via SKIP_ENV_VALIDATION.
"""

import os
from typing import Optional
from urllib.parse import urlparse

from autoshop.core.config import settings


class EnvValidationError(RuntimeError):
    """Raised when environment validation fails."""


def _is_valid_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_env(env: Optional[str] = None, settings_obj=None) -> bool:
    """Validate environment configuration.

    Args:
        env: Override environment name (defaults to settings.ENV)
        settings_obj: Override settings object (defaults to autoshop.core.config.settings)

    Returns:
        True if validation passes.

    Raises:
        EnvValidationError when a rule is violated.
    """
    if os.getenv("SKIP_ENV_VALIDATION") == "1":
        return True

    cfg = settings_obj or settings
    mode = (env or getattr(cfg, "ENV", "development") or "development").lower()
    upgrade_url = getattr(cfg, "UPGRADE_URL", None)
    origins = getattr(cfg, "CORS_ALLOWED_ORIGINS", "") or ""

    if upgrade_url and not _is_valid_http_url(upgrade_url):
        raise EnvValidationError("UPGRADE_URL must be an http(s) URL (e.g. https://app.example.com/billing)")

    if mode == "production":
        if not upgrade_url:
            raise EnvValidationError("UPGRADE_URL is required in production")
        allowed = [origin.strip() for origin in origins.split(",") if origin.strip()]
        if not allowed or "*" in allowed:
            raise EnvValidationError("CORS_ALLOWED_ORIGINS must list explicit origins in production")

    return True
