"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BIJOUX_",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./bijoux_ledger.db"

    # Service
    service_name: str = "bijoux-ledger"
    log_level: str = "INFO"

    # Messages
    currency_label: str = "FRW"
    message_locale: str = "rw"  # "rw" | "en"
    default_thank_you_message: str = "Thank you very much!! Mugire ibihe byiza."

    # Settlement
    settlement_max_retries: int = 3
    settlement_backoff_base: float = 0.05  # Exponential backoff base in seconds

    # Inventory collaborator
    inventory_backend: str = "sql"  # "sql" | "http" | "none"
    inventory_api_base: str = "http://localhost:8003"
    http_timeout_seconds: float = 5.0

    # Listing
    unpaid_page_size: int = 20


settings = Settings()
