from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class ListingSource(str, Enum):
    """Website a listing URL belongs to. Selects the extractor strategy."""

    PROPERTY24 = "property24"
    PRIVATE_PROPERTY = "privateproperty"
    GUMTREE = "gumtree"
    PROPERTY_CO_ZA = "property_co_za"
    SEEFF = "seeff"
    REMAX = "remax"
    PAM_GOLDING = "pamgolding"
    GENERIC = "generic"


class RawDocument(BaseModel):
    """Fetched HTML plus fetch metadata. Lives for one extraction call."""

    html: str
    status_code: int
    final_url: str
    byte_length: int


class ExtractedListing(BaseModel):
    """
    Listing fields as pulled from the page.

    Absence is always an empty string or empty list, never None, so callers
    can index any field unconditionally.
    """

    title: str = ""
    price: str = ""
    address: str = ""
    description: str = ""

    bedrooms: str = ""
    bathrooms: str = ""
    garages: str = ""
    erf_size: str = ""
    floor_size: str = ""
    property_type: str = ""

    agent_name: str = ""
    agent_phone: str = ""
    agent_email: str = ""
    agency_name: str = ""

    features: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)

    suburb: str = ""
    city: str = ""
    province: str = ""
    listing_date: str = ""
    listing_id: str = ""

    source: str = ListingSource.GENERIC.value
    listing_url: str = ""
