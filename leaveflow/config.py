from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "LeaveFlow"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://leaveflow:leaveflow@db:5432/leaveflow"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    # Leave accounting
    fiscal_year_start_month: int = 4
    max_request_horizon_days: int = 365
    long_leave_threshold_days: int = 5

    # Coverage analysis
    coverage_high_risk_below: float = 50.0
    coverage_medium_risk_below: float = 75.0
    max_coverage_range_days: int = 366

    # Transaction retry on concurrency conflicts
    max_transaction_retries: int = 3
    retry_backoff_seconds: float = 0.05


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
