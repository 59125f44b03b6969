"""Downstream mapping services."""
from .listing_mapper import price_range, target_market, to_storage_record, to_template_data

__all__ = ["price_range", "target_market", "to_storage_record", "to_template_data"]
