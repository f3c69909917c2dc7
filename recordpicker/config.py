"""Configuration management for the record picker."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Picker settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RECORDPICKER_",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Search Configuration
    # ==========================================================================
    min_length: int = Field(
        default=3,
        ge=1,
        description="Characters required before a search fires",
    )
    delay_ms: int = Field(
        default=500,
        ge=0,
        description="Settle delay after the last keystroke",
    )
    page_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of candidates fetched per search",
    )
    default_label_field: str = Field(
        default="name",
        min_length=1,
        description="Record attribute displayed when no label field is given",
    )

    # ==========================================================================
    # Display Configuration
    # ==========================================================================
    no_matches_label: str = Field(
        default="No matches found!",
        description="Sentinel row shown when a search returns nothing",
    )
    search_error_label: str = Field(
        default="Unable to search for items!",
        description="Sentinel row shown when a search fails",
    )
    busy_class: str = Field(
        default="loading-small",
        description="Class set on the input while a search is running",
    )

    # ==========================================================================
    # Remote API Configuration
    # ==========================================================================
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the service backing remote collections",
    )
    api_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds",
    )
    search_page_param: str = Field(
        default="per_page",
        description="Query parameter carrying the page size",
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # ==========================================================================
    # Validators
    # ==========================================================================
    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v

    @property
    def delay(self) -> float:
        """Settle delay in seconds."""
        return self.delay_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Reload settings (useful after env changes)."""
    get_settings.cache_clear()
    return get_settings()
