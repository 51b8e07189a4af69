"""AdPulse — Central Configuration via Pydantic Settings."""

import os
from datetime import timedelta, timezone
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Database ──
    database_url: str = ""
    db_pool_size: int = 15
    db_max_overflow: int = 10
    db_pool_recycle: int = 300

    # ── Cache ──
    redis_url: str = ""  # empty = cache disabled
    cache_ttl_seconds: int = 300

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = True
    cors_origins: List[str] = ["http://localhost:5173"]

    # ── Reporting ──
    report_utc_offset_hours: int = 3  # MSK
    approvals_default_limit: int = 1000
    approvals_max_limit: int = 1000
    clicks_default_limit: int = 50
    clicks_max_limit: int = 100
    default_click_pixel: str = "{{pixel.id}}"

    # ── HTTP client ──
    api_base_url: str = "http://localhost:10000/api"
    client_retry_attempts: int = 2
    client_retry_delay_seconds: float = 1.0

    @property
    def effective_database_url(self) -> str:
        """Return the configured database URL, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/adpulse.db"
        return "sqlite:///./adpulse.db"

    @property
    def report_tz(self) -> timezone:
        """Fixed-offset zone used for today/yesterday/month arithmetic."""
        return timezone(timedelta(hours=self.report_utc_offset_hours))

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
