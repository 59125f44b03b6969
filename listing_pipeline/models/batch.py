from typing import List, Optional

from pydantic import BaseModel, Field

from .listing import ExtractedListing


class BatchResult(BaseModel):
    """Per-URL outcome of a batch run."""

    url: str
    success: bool
    listing: Optional[ExtractedListing] = None
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class BatchSummary(BaseModel):
    """Aggregate counts for a batch run. Only successful items are billable."""

    total: int = 0
    successful: int = 0
    failed: int = 0
