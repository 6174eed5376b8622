"""
Application configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache

from mrv.core.constants import VERIFIED_SCORE_THRESHOLD, REVIEW_SCORE_THRESHOLD


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file = ".env",
        env_file_encoding = "utf-8",
        extra = "ignore"
    )
    
    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./mrv.db", alias="DATABASE_URL")
    
    # Application
    app_name: str = Field(default="MRV Verification Engine", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    port: int = Field(default=8000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Scoring bands
    verified_score_threshold: float = Field(
        default=VERIFIED_SCORE_THRESHOLD, alias="VERIFIED_SCORE_THRESHOLD", ge=0, le=1
    )
    review_score_threshold: float = Field(
        default=REVIEW_SCORE_THRESHOLD, alias="REVIEW_SCORE_THRESHOLD", ge=0, le=1
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
