"""
Configuration settings for the Listing Extraction Pipeline.

Uses pydantic-settings for robust configuration management with environment
variable support and validation.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="development", description="Runtime environment")

    # Server Configuration
    api_key: str = Field(default="", description="API key")
    require_api_key: bool = Field(
        default=False, description="Require API key for requests"
    )
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")
    log_rotation: str = Field(
        default="daily", description="Log rotation policy (daily, weekly, monthly)"
    )
    log_retention: int = Field(default=30, description="Number of rotated logs to keep")

    # Fetch Configuration
    request_timeout: float = Field(
        default=10.0, description="Request timeout in seconds"
    )
    max_redirects: int = Field(default=5, description="Maximum redirects to follow")
    min_body_bytes: int = Field(
        default=100, description="Smallest response body accepted as a listing page"
    )
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        description="User agent sent to listing sites",
    )
    relay_url: Optional[str] = Field(
        default=None,
        description="Relay endpoint prefixed to the encoded target URL, e.g. https://api.allorigins.win/raw?url=",
    )
    http_proxy: Optional[str] = Field(
        default=None, description="Outbound HTTP proxy (host:port or URL)"
    )

    # Extraction / Validation Configuration
    max_extracted_images: int = Field(
        default=10, description="Maximum images kept by the extractor"
    )
    max_validated_images: int = Field(
        default=20, description="Maximum images kept by the validator"
    )

    # Batch Configuration
    batch_delay: float = Field(
        default=1.0, description="Delay between batch requests in seconds"
    )
    batch_max_concurrency: int = Field(
        default=1, description="Concurrent batch items (1 = strictly sequential)"
    )
    max_batch_size: int = Field(default=10, description="Maximum URLs per batch call")

    @field_validator("request_timeout", "batch_delay")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must be non-negative")
        return value

    @field_validator("max_redirects", "batch_max_concurrency", "max_batch_size")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("dev", "development", "local")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
