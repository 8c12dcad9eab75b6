from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        validate_assignment=True,
    )

    app_env: str = "dev"
    database_url: str

    admin_api_key: str | None = (
        None  # Optional - if not set, operator endpoints are unprotected (dev mode)
    )

    # Generative responder (optional - deterministic dialogue policy is always the fallback)
    ai_responder_enabled: bool = False
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 200

    # Qualified-lead email notifications (SendGrid v3 HTTP API)
    feature_notifications_enabled: bool = True
    sendgrid_api_key: str | None = None
    notification_from_email: str = "notifications@leadsavr.com"
    notifications_dry_run: bool = True  # Set to False in production to enable real sending
    dashboard_url: str = "https://app.leadsavr.com/dashboard"

    # Profile used when a conversation references an unknown customer
    default_company_name: str = "Elite Remodeling"
    default_service_areas: str = "90210"  # Comma-separated zip prefixes
    default_minimum_budget: int = 75000
    default_timeline_threshold: int = 12  # Months

    # Comma-separated list of origins allowed to embed the chat widget
    cors_allow_origins: str = "*"


# Settings will load from environment variables or .env file
# Required fields will raise ValidationError if missing (fail-fast)
settings = Settings()
