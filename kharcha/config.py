"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration.

    Values are read from environment variables (or a `.env` file).
    """

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_key: str
    supabase_http_max_connections: int = 100
    supabase_http_max_keepalive_connections: int = 50
    supabase_postgrest_timeout_seconds: int = 30

    # App
    app_name: str = "Kharcha API"
    app_version: str = "1.0.0"
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000"
    enable_scheduler: bool = True
    currency_label: str = "PKR"

    # Scheduling
    timezone: str = "UTC"
    snapshot_poll_interval_seconds: int = 60

    # Access control
    admin_emails: str = ""
    auth_token_cache_ttl_seconds: int = 15
    auth_token_cache_max_entries: int = 1024
    profile_cache_ttl_seconds: int = 30

    # Performance tuning
    slow_request_log_threshold_ms: int = 0
    slow_query_log_threshold_ms: int = 0

    # Assistant
    assistant_api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    assistant_api_key: str = ""
    assistant_model: str = "google/gemini-2.0-flash-lite-preview-02-05:free"
    assistant_system_prompt: str = (
        "Answer questions strictly from the ledger context below. "
        "Decline anything unrelated to the household ledger."
    )
    assistant_site_url: str = ""
    assistant_site_name: str = "Kharcha"
    assistant_timeout_seconds: int = 30
    assistant_expense_limit: int = 50
    assistant_meal_limit: int = 20

    @property
    def is_production(self) -> bool:
        """Return True when running in production."""
        return self.environment == "production"

    @property
    def origins_list(self) -> list[str]:
        """Parse comma-separated ALLOWED_ORIGINS into a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def admin_emails_set(self) -> set[str]:
        """Parse comma-separated ADMIN_EMAILS into a lowercase set."""
        return {e.strip().lower() for e in self.admin_emails.split(",") if e.strip()}

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()  # type: ignore[call-arg]
