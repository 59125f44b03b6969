"""
Selector tables for listing field extraction.

Each source maps a logical field to CSS selector candidates ranked from most
site-specific to most generic. The generic table is appended to every
source-specific table, so unknown markup always gets a best-effort pass.
"""

from typing import Dict, List

from listing_pipeline.models import ListingSource


SelectorTable = Dict[str, List[str]]


GENERIC_SELECTORS: SelectorTable = {
    "title": ["h1", ".title", ".property-title", "title"],
    "price": [".price", ".property-price", ".cost", '[itemprop="price"]'],
    "address": [".location", ".address", ".property-location", '[itemprop="address"]'],
    "description": [".description", ".property-description", ".details"],
    "property_type": [".property-type", '[data-cy="property-type"]'],
    "bedrooms": [".bedrooms", ".beds"],
    "bathrooms": [".bathrooms", ".baths"],
    "garages": [".garages", ".parking"],
    "erf_size": [".erf-size", ".plot-size"],
    "floor_size": [".floor-size", ".building-size"],
    "agent_name": [".agent-name", ".contact-name"],
    "agent_phone": [".agent-phone", ".contact-phone"],
    "agent_email": [".agent-email", ".contact-email"],
    "agency_name": [".agency-name"],
    "suburb": [".suburb"],
    "city": [".city"],
    "province": [".province"],
    "listing_date": [".listing-date", "time"],
    "features": [".features li", ".amenities li"],
    "images": [".gallery img", ".images img", 'meta[property="og:image"]'],
}


PROPERTY24_SELECTORS: SelectorTable = {
    "title": [
        "h1.p24_propertyTitle",
        '[data-cy="listing-title"]',
        ".property-title h1",
        ".listing-title",
    ],
    "price": [".p24_price", '[data-cy="listing-price"]', '[data-cy="price"]', ".listing-price"],
    "address": [
        ".p24_address",
        '[data-cy="listing-address"]',
        '[data-cy="address"]',
        ".property-address",
        ".listing-address",
    ],
    "description": [
        ".p24_description",
        '[data-cy="listing-description"]',
        '[data-cy="description"]',
        ".property-description",
        ".listing-description",
    ],
    "property_type": [".p24_propertyType"],
    "bedrooms": ['[data-cy="listing-bedrooms"]', ".p24_featureDetails .bedrooms"],
    "bathrooms": ['[data-cy="listing-bathrooms"]', ".p24_featureDetails .bathrooms"],
    "garages": ['[data-cy="listing-garages"]', ".p24_featureDetails .garages"],
    "erf_size": ['[data-cy="listing-erf-size"]'],
    "floor_size": ['[data-cy="listing-floor-size"]'],
    "agent_name": [".p24_agentName", '[data-cy="agent-name"]'],
    "agent_phone": [".p24_agentPhone", '[data-cy="agent-phone"]'],
    "agent_email": [".p24_agentEmail", '[data-cy="agent-email"]'],
    "agency_name": [".p24_agencyName", '[data-cy="agency-name"]'],
    "suburb": [".p24_suburb", '[data-cy="suburb"]'],
    "city": [".p24_city", '[data-cy="city"]'],
    "province": [".p24_province", '[data-cy="province"]'],
    "listing_date": [".p24_listingDate", '[data-cy="listing-date"]'],
    "features": [
        ".p24_features li",
        '[data-cy="listing-features"] li',
        '[data-cy="feature"]',
        ".property-features li",
    ],
    "images": [
        ".p24_gallery img",
        '[data-cy="listing-gallery"] img',
        '[data-cy="property-image"]',
        ".property-gallery img",
        ".property-images img",
    ],
}


PRIVATE_PROPERTY_SELECTORS: SelectorTable = {
    "title": [".property-title", ".listing-title"],
    "price": [".property-price", ".listing-price"],
    "address": [".property-address"],
    "description": [".property-description", ".listing-description"],
    "agent_name": [".agent-details h3"],
    "agent_phone": [".phone"],
    "agent_email": [".email"],
    "features": [".property-features li"],
    "images": [".property-gallery img"],
}


GUMTREE_SELECTORS: SelectorTable = {
    "title": [".ad-title", ".listing-title"],
    "price": [".ad-price", ".listing-price"],
    "address": [".listing-location", ".ad-location"],
    "description": [".ad-description", ".listing-description"],
    "agent_name": [".seller-name"],
    "agent_phone": [".seller-phone"],
    "agent_email": [".seller-email"],
    "images": [".ad-images img"],
}


SOURCE_SELECTORS: Dict[ListingSource, SelectorTable] = {
    ListingSource.PROPERTY24: PROPERTY24_SELECTORS,
    ListingSource.PRIVATE_PROPERTY: PRIVATE_PROPERTY_SELECTORS,
    ListingSource.GUMTREE: GUMTREE_SELECTORS,
}


# Last-resort keyword scan for numeric details when no selector yields a number.
DETAIL_KEYWORDS: Dict[str, str] = {
    "bedrooms": r"bedroom",
    "bathrooms": r"bathroom",
    "garages": r"garage",
    "erf_size": r"erf.*size",
    "floor_size": r"floor.*size",
}


def selectors_for(source: ListingSource, field: str) -> List[str]:
    """Ordered selector candidates for ``field``: source-specific, then generic."""
    specific = SOURCE_SELECTORS.get(source, {}).get(field, [])
    merged: List[str] = []
    for selector in specific + GENERIC_SELECTORS.get(field, []):
        if selector not in merged:
            merged.append(selector)
    return merged
