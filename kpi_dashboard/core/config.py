"""
Application configuration using Pydantic Settings.

Values come from the environment or a .env file in the working directory.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "production"] = "local"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./kpi_dashboard.db"

    # ===========================================
    # Auth
    # ===========================================
    # - mock: bearer token is the user ID (development)
    # - local: password login + HS256 JWT
    AUTH_PROVIDER: Literal["mock", "local"] = "mock"
    LOCAL_JWT_SECRET: str = ""
    LOCAL_JWT_ISSUER: str = "kpi-dashboard-local"
    LOCAL_JWT_EXPIRE_MINUTES: int = 60 * 24

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    # ===========================================
    # KPI behaviour
    # ===========================================
    # Missing-entry report ignores Saturdays and Sundays
    MISSING_ENTRY_SKIP_WEEKENDS: bool = True
    # Agents editing their own entries are not audited unless enabled
    AUDIT_AGENT_CHANGES: bool = False

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == "local"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
