"""Configuration module for the Listing Extraction Pipeline."""
from .settings import get_settings, Settings
from .logging_config import (
    setup_logging,
    get_service_logger,
    get_api_logger,
    get_logger,
)

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_service_logger",
    "get_api_logger",
    "get_logger",
]
