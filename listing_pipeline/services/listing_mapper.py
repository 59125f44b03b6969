"""
Maps sanitized listings onto the storage schema and onto marketing template
fields. Field renaming and grouping only; nothing here touches the network or
a database.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from listing_pipeline.models import ExtractedListing
from listing_pipeline.scraping.web_scraper_utils import WebScraperUtils


DEFAULT_PROPERTY_TYPE = "Residential"
USP_FEATURE_COUNT = 3

PRICE_BANDS = [
    (5_000_000, "Luxury"),
    (2_000_000, "Premium"),
    (1_000_000, "Mid-Range"),
    (500_000, "Affordable"),
]

TARGET_MARKETS = [
    (4, "Families"),
    (3, "Growing Families"),
    (2, "Couples & Young Families"),
]


def _numeric_price(price: Union[str, float, int, None]) -> float:
    if isinstance(price, (int, float)):
        return float(price)
    return WebScraperUtils.parse_number(price) or 0.0


def _count(value: Union[str, int, None]) -> int:
    if isinstance(value, int):
        return value
    digits = WebScraperUtils.first_digit_run(value)
    return int(digits) if digits else 0


def price_range(price: Union[str, float, int, None]) -> str:
    """Marketing price band for a price string or number."""
    value = _numeric_price(price)
    for floor, label in PRICE_BANDS:
        if value >= floor:
            return label
    return "Budget"


def target_market(bedrooms: Union[str, int, None]) -> str:
    """Buyer segment by bedroom count."""
    count = _count(bedrooms)
    for minimum, label in TARGET_MARKETS:
        if count >= minimum:
            return label
    return "First-Time Buyers"


def _neighborhood_highlights(listing: ExtractedListing) -> str:
    return ", ".join(part for part in (listing.suburb, listing.city) if part)


def _unique_selling_points(listing: ExtractedListing) -> str:
    return ", ".join(listing.features[:USP_FEATURE_COUNT])


def to_storage_record(
    listing: ExtractedListing,
    original_url: str = "",
    imported_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the storage record for a sanitized listing.

    Counts and price become numbers (0 when absent); location, agent and
    source metadata are grouped into nested objects; images keep their order.
    """
    imported_at = imported_at or datetime.now(timezone.utc)
    square_footage = WebScraperUtils.parse_number(
        listing.floor_size
    ) or WebScraperUtils.parse_number(listing.erf_size)

    return {
        "title": listing.title,
        "description": listing.description,
        "bedrooms": _count(listing.bedrooms),
        "bathrooms": _count(listing.bathrooms),
        "garages": _count(listing.garages),
        "square_footage": int(square_footage or 0),
        "erf_size": listing.erf_size,
        "floor_size": listing.floor_size,
        "property_type": listing.property_type or DEFAULT_PROPERTY_TYPE,
        "price": _numeric_price(listing.price),
        "price_range": price_range(listing.price),
        "location": {
            "address": listing.address,
            "suburb": listing.suburb,
            "city": listing.city,
            "province": listing.province,
        },
        "features": list(listing.features),
        "images": [
            {"url": url, "order": index} for index, url in enumerate(listing.images)
        ],
        "agent_info": {
            "name": listing.agent_name,
            "phone": listing.agent_phone,
            "email": listing.agent_email,
            "agency_name": listing.agency_name,
        },
        "source_data": {
            "listing_id": listing.listing_id,
            "source": listing.source,
            "original_url": original_url or listing.listing_url,
            "listing_date": listing.listing_date,
            "imported_at": imported_at.isoformat(),
        },
        "target_market": target_market(listing.bedrooms),
        "neighborhood_highlights": _neighborhood_highlights(listing),
        "unique_selling_points": _unique_selling_points(listing),
        "status": "imported",
    }


def to_template_data(listing: ExtractedListing) -> Dict[str, Any]:
    """Flat field set consumed by the marketing templates."""
    return {
        "price": listing.price,
        "address": listing.address,
        "bedrooms": listing.bedrooms,
        "bathrooms": listing.bathrooms,
        "garages": listing.garages,
        "features": ", ".join(listing.features),
        "agent_name": listing.agent_name,
        "agent_phone": listing.agent_phone,
        "agent_email": listing.agent_email,
        "description": listing.description,
        "property_type": listing.property_type,
        "price_range": price_range(listing.price),
        "neighborhood_highlights": _neighborhood_highlights(listing),
        "target_market": target_market(listing.bedrooms),
        "unique_selling_points": _unique_selling_points(listing),
        "erf_size": listing.erf_size,
        "floor_size": listing.floor_size,
        "suburb": listing.suburb,
        "city": listing.city,
        "province": listing.province,
        "listing_date": listing.listing_date,
        "listing_id": listing.listing_id,
        "images": list(listing.images),
    }
