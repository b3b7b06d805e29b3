"""Configuration management for CSV Insight.

Uses pydantic-settings for type-safe environment variable loading.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CSV_INSIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Analysis Settings
    top_k_values: int = Field(
        default=5,
        ge=1,
        description="Number of most frequent values kept for text columns",
    )
    min_bins: int = Field(
        default=10,
        ge=1,
        description="Lower bound on histogram bin count",
    )
    max_bins: int = Field(
        default=50,
        ge=1,
        description="Upper bound on histogram bin count",
    )
    missing_markers: list[str] = Field(
        default_factory=lambda: ["", "NA"],
        description="Cell values treated as missing (after stripping)",
    )

    # Upload / Presentation
    preview_rows: int = Field(
        default=10,
        ge=0,
        description="Rows shown in the data preview table",
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Largest accepted CSV upload",
    )


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
