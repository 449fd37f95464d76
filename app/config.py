"""Agency Portal — Central Configuration via Pydantic Settings."""

import os
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file.

    The agency Meta access token is not configured here: it lives in the
    settings record of the store and is injected into each sync call.
    """

    # ── Meta API ──
    meta_api_version: str = "v19.0"
    meta_base_url: str = "https://graph.facebook.com"
    meta_page_limit: int = 200
    meta_max_pages: int = 10

    # ── Database ──
    database_url: str = ""

    # ── AI Providers ──
    anthropic_api_key: Optional[str] = None
    sarvam_api_key: Optional[str] = None
    default_ai_provider: str = "claude"  # claude | sarvam

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = False
    sync_hour: int = 3  # Nightly all-time sync at 3 AM UTC

    # ── Sync policy ──
    conversation_click_fallback: bool = True
    purge_batch_size: int = 400
    purge_pause_seconds: float = 0.5

    @property
    def effective_database_url(self) -> str:
        """Return PostgreSQL URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/portal.db"
        return "sqlite:///./portal.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
