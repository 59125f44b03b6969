from .listing import ListingSource, RawDocument, ExtractedListing
from .validation import ValidationOptions, ValidationReport
from .batch import BatchResult, BatchSummary

__all__ = [
    "ListingSource",
    "RawDocument",
    "ExtractedListing",
    "ValidationOptions",
    "ValidationReport",
    "BatchResult",
    "BatchSummary",
]
