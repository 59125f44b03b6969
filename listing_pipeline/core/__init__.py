"""Core primitives for the Listing Extraction Pipeline."""
from .exceptions import (
    ListingPipelineException,
    UnsupportedUrlError,
    FetchError,
    ParseError,
    ConfigurationException,
)

__all__ = [
    "ListingPipelineException",
    "UnsupportedUrlError",
    "FetchError",
    "ParseError",
    "ConfigurationException",
]
