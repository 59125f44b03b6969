"""Pipeline orchestration module for the Listing Extraction Pipeline."""
from .pipeline_manager import HostPacer, ListingPipeline, get_pipeline, pipeline_manager

__all__ = ["HostPacer", "ListingPipeline", "get_pipeline", "pipeline_manager"]
