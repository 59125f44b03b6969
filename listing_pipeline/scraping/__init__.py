"""Source resolution, fetching and field extraction for listing pages."""
from .source_resolver import SourceResolver, source_resolver, get_source_resolver
from .fetcher import ListingFetcher, listing_fetcher, get_listing_fetcher
from .field_extractor import FieldExtractor, field_extractor, get_field_extractor
from .web_scraper_utils import WebScraperUtils

__all__ = [
    "SourceResolver",
    "source_resolver",
    "get_source_resolver",
    "ListingFetcher",
    "listing_fetcher",
    "get_listing_fetcher",
    "FieldExtractor",
    "field_extractor",
    "get_field_extractor",
    "WebScraperUtils",
]
