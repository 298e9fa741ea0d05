"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from NEURACARE_* environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NEURACARE_",
        extra="ignore",
    )

    # Storage
    db_path: str = "data/db.json"

    # CORS
    frontend_origin: str = "http://localhost:5173"

    # Logging
    log_format: str = "json"  # 'json' or 'text'
    log_level: str = "INFO"
    service_name: str = "neuracare-api"

    # Consent
    consent_retention_days: int = 7  # Hold window after consent is revoked

    # AI enrichment
    ai_provider_order: list[str] = ["openai", "perplexity", "gemini", "claude"]
    # Outer bound for the whole failover loop. Unset means providers x
    # slowest provider timeout (80s for the default four).
    ai_enrichment_timeout_seconds: float | None = None
    ai_max_tokens: int = 500
    ai_temperature: float = 0.7

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_timeout_seconds: float = 15.0

    perplexity_api_key: str = ""
    perplexity_model: str = "sonar"
    perplexity_base_url: str = "https://api.perplexity.ai"
    perplexity_timeout_seconds: float = 20.0

    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 18.0

    claude_api_key: str = ""
    claude_model: str = "claude-sonnet-4-5-20250929"
    claude_timeout_seconds: float = 20.0


settings = Settings()
