"""
Configuration management for the loyalty and kitchen routing services.

Values are read from environment variables (or a local `.env` file) and
validated once at startup.
"""

from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    # Database Configuration
    database_url: str = "sqlite:///./loyalty_kds.db"
    log_sql_queries: bool = False
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # Environment Settings
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Loyalty ledger
    loyalty_tokens_per_dollar: int = Field(2, ge=1, le=100)
    loyalty_usdc_bonus_enabled: bool = True
    loyalty_transactions_limit: int = Field(50, ge=1)
    loyalty_leaderboard_size: int = Field(10, ge=1)
    loyalty_active_window_days: int = 30  # "active customer" lookback
    loyalty_tokens_per_dollar_redeemed: int = 100  # 100 tokens = $1

    # Audit sink (fire-and-forget)
    audit_sink_url: Optional[str] = None
    audit_timeout_seconds: float = Field(2.0, gt=0, le=30)
    audit_max_workers: int = Field(2, ge=1)
    audit_max_pending: int = Field(100, ge=1)  # queued posts before events are dropped

    # Kitchen display routing
    kds_seed_default_stations: bool = True
    kds_category_matcher: str = "longest"

    @field_validator("kds_category_matcher")
    @classmethod
    def validate_matcher(cls, v: str) -> str:
        """Only the matchers shipped with the router are accepted."""
        v = v.lower().strip()
        if v not in ("longest", "first"):
            raise ValueError("KDS_CATEGORY_MATCHER must be 'longest' or 'first'")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def audit_http_enabled(self) -> bool:
        return bool(self.audit_sink_url)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()


# Export settings instance for easy import
settings = get_settings()


def validate_production_config():
    """Validate configuration for production deployment."""
    if settings.is_production:
        issues = []

        if settings.debug:
            issues.append("DEBUG is enabled in production")

        if settings.database_url.startswith("sqlite"):
            issues.append("SQLite database configured in production")

        if issues:
            raise ValueError(
                f"Production configuration issues detected: {', '.join(issues)}"
            )


# Validate on import if in production
if settings.is_production:
    validate_production_config()
