import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False

    # HTTP surface
    CORS_ALLOWED_ORIGINS: str = "http://localhost:5173"  # comma-separated

    # Billing page the upgrade call-to-action links to
    UPGRADE_URL: Optional[str] = None

    # Log every locked-feature attempt as feature.locked
    AUDIT_LOCKED_FEATURES: bool = True

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ALLOWED_ORIGINS.split(",") if origin.strip()]


settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate recommended configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("autoshop")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    recommended_keys = [
        "UPGRADE_URL",
    ]

    missing = [key for key in recommended_keys if not getattr(cfg, key, None)]
    if missing:
        message = f"Missing required configuration: {', '.join(missing)}"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    return True
