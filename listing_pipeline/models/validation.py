from typing import List, Optional

from pydantic import BaseModel, Field

from .listing import ExtractedListing


class ValidationOptions(BaseModel):
    """Switches for a single validation run."""

    strict_mode: bool = False
    allow_partial_data: bool = True
    auto_correct: bool = True


class ValidationReport(BaseModel):
    """Outcome of validating one listing.

    ``errors`` block the record, ``warnings`` are advisory. Both keep the order
    in which the validation stages ran. ``sanitized_data`` is set only when
    the record is valid.
    """

    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    sanitized_data: Optional[ExtractedListing] = None
