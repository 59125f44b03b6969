"""
Unit tests for the source resolver.

Tests URL classification, listing ID extraction and the supported-URL check.
"""

import pytest

from listing_pipeline.models import ListingSource
from listing_pipeline.scraping.source_resolver import SourceResolver


class TestSourceResolver:
    """Test cases for SourceResolver class."""

    @pytest.fixture
    def resolver(self):
        return SourceResolver()

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://www.property24.com/for-sale/sea-point/116123456", ListingSource.PROPERTY24),
            ("https://www.privateproperty.co.za/for-sale/T4012345", ListingSource.PRIVATE_PROPERTY),
            ("https://www.property.co.za/property/12345678", ListingSource.PROPERTY_CO_ZA),
            ("https://www.gumtree.co.za/a-houses/cape-town/10012345678", ListingSource.GUMTREE),
            ("https://www.seeff.com/results/residential/for-sale/123456", ListingSource.SEEFF),
            ("https://www.remax.co.za/property/for-sale/123456", ListingSource.REMAX),
            ("https://www.pamgolding.co.za/property-details/123456", ListingSource.PAM_GOLDING),
            ("https://example.com/listing/123456", ListingSource.GENERIC),
        ],
    )
    def test_resolve(self, resolver, url, expected):
        """Test URL classification by host."""
        assert resolver.resolve(url) is expected

    def test_private_property_is_not_mistaken_for_property_co_za(self, resolver):
        """Test privateproperty.co.za is not classified as property.co.za."""
        url = "https://WWW.PrivateProperty.co.za/for-sale/western-cape/T4012345"
        assert resolver.resolve(url) is ListingSource.PRIVATE_PROPERTY

    def test_resolve_garbage_is_generic(self, resolver):
        """Test malformed URLs resolve to generic."""
        assert resolver.resolve("not a url") is ListingSource.GENERIC
        assert resolver.resolve("") is ListingSource.GENERIC

    def test_property24_listing_id(self, resolver, property24_url):
        """Test Property24 listing ID extraction."""
        assert resolver.extract_listing_id(property24_url) == "116123456"

    def test_property24_listing_id_ignores_query(self, resolver):
        """Test Property24 listing ID ignores query and fragment."""
        url = "https://www.property24.com/for-sale/sea-point/cape-town/western-cape/432/116123456?page=2#photos"
        assert resolver.extract_listing_id(url) == "116123456"

    def test_property24_short_path(self, resolver):
        """Test Property24 listing ID on a short path."""
        url = "https://www.property24.com/for-sale/116123456"
        assert resolver.extract_listing_id(url) == "116123456"

    def test_private_property_listing_id(self, resolver):
        """Test Private Property T-prefixed listing ID."""
        url = "https://www.privateproperty.co.za/for-sale/western-cape/cape-town/sea-point/T4012345"
        assert resolver.extract_listing_id(url) == "T4012345"

    def test_trailing_numeric_id_for_other_sources(self, resolver):
        """Test trailing numeric IDs for other sources."""
        assert resolver.extract_listing_id("https://www.property.co.za/property/12345678") == "12345678"
        assert resolver.extract_listing_id("https://www.seeff.com/results/for-sale/654321/") == "654321"

    def test_listing_id_missing(self, resolver):
        """Test URLs without a listing ID."""
        assert resolver.extract_listing_id("https://www.property24.com/for-sale/sea-point") is None
        assert resolver.extract_listing_id("") is None

    def test_listing_id_uses_given_source(self, resolver):
        """Test listing ID extraction with a pre-resolved source."""
        url = "https://www.property24.com/for-sale/116123456"
        assert resolver.extract_listing_id(url, ListingSource.PROPERTY24) == "116123456"

    def test_is_supported_url(self, resolver, property24_url):
        """Test supported URL check."""
        assert resolver.is_supported_url(property24_url)
        assert resolver.is_supported_url("http://www.gumtree.co.za/a-houses/10012345678")

        assert not resolver.is_supported_url("https://example.com/listing/123456")
        assert not resolver.is_supported_url("ftp://www.property24.com/for-sale/116123456")
        assert not resolver.is_supported_url("www.property24.com/for-sale/116123456")
        assert not resolver.is_supported_url("")
