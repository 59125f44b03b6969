"""HTTP adapter for the Listing Extraction Pipeline."""
