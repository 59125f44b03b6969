"""Validation and normalization of extracted listings."""
from .validator import ListingValidator, listing_validator, validate_listing

__all__ = ["ListingValidator", "listing_validator", "validate_listing"]
