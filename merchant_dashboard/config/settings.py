"""
Merchant Dashboard
Centralized Configuration Management

Configuration is loaded with Pydantic settings from environment variables
and an optional .env file. Each subsystem owns a section with its own
environment prefix.
"""

from functools import lru_cache
from typing import List, Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsSettings(BaseSettings):
    """Dashboard aggregation windows and snapshot bounds"""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    window_days: int = Field(default=7, ge=1, le=90, description="Days in the daily revenue series")
    comparison_days: int = Field(default=7, ge=1, description="Days per period-over-period window")
    snapshot_limit: int = Field(default=100, ge=1, description="Max transactions fetched per dashboard")
    recent_limit: int = Field(default=5, ge=0, description="Recent transactions shown on the dashboard")
    timezone: str = Field(default="UTC", description="Time zone used for calendar-day bucketing")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate IANA time zone name"""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown time zone: {v}")
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        """Configured time zone"""
        return ZoneInfo(self.timezone)


class TransactionSourceSettings(BaseSettings):
    """Transaction storage collaborator configuration"""

    model_config = SettingsConfigDict(env_prefix="TRANSACTIONS_")

    backend: Literal["file", "demo"] = Field(default="demo", description="Transaction source backend")
    path: str = Field(default="./data/transactions.csv", description="Transactions file for the file backend")
    file_format: Literal["csv", "json", "jsonl", "parquet"] = Field(default="csv", description="Transactions file format")
    validate_on_load: bool = Field(default=True, description="Run data quality checks when loading files")

    # Demo backend
    demo_size: int = Field(default=250, ge=0, description="Synthetic transactions generated for the demo backend")
    demo_seed: int = Field(default=42, description="Seed for the demo generator")
    demo_days: int = Field(default=21, ge=1, description="Day span covered by demo transactions")


class SecuritySettings(BaseSettings):
    """Request identity, CORS and rate limiting"""

    model_config = SettingsConfigDict(env_prefix="")

    # Identity is asserted by the upstream auth proxy
    user_id_header: str = Field(default="X-User-Id", description="Header carrying the authenticated user id")
    user_email_header: str = Field(default="X-User-Email", description="Header carrying the authenticated user email")

    # Rate limiting
    rate_limit_requests: int = Field(default=100, description="Rate limit requests")
    rate_limit_window_seconds: int = Field(default=60, description="Rate limit window")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins"
    )


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", description="Log format: json or text")
    log_file: Optional[str] = Field(default=None, description="Log file path")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="merchant-dashboard", description="Application name")
    app_env: str = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    api_workers: int = Field(default=4, description="API workers")

    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    transactions: TransactionSourceSettings = Field(default_factory=TransactionSourceSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
