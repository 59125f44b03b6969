"""
Unit tests for the field extractor.

Tests per-source selector tables, the generic fallback, image and feature
collection, keyword scanning and parse failures.
"""

import pytest

from listing_pipeline.core.exceptions import ParseError
from listing_pipeline.models import ListingSource
from listing_pipeline.scraping.field_extractor import FieldExtractor


class TestFieldExtractor:
    """Test cases for FieldExtractor class."""

    @pytest.fixture
    def extractor(self):
        return FieldExtractor(max_images=10)

    def test_extract_property24(self, extractor, property24_html):
        """Test extraction of a full Property24 page."""
        listing = extractor.extract(property24_html, ListingSource.PROPERTY24)

        assert listing.title == "3 Bedroom House in Sea Point"
        assert listing.price == "R 4 250 000"
        assert listing.address == "12 Beach Road, Sea Point, Cape Town"
        assert listing.property_type == "House"
        assert listing.bedrooms == "3"
        assert listing.bathrooms == "2"
        assert listing.garages == "1"
        assert listing.erf_size == "450"
        assert listing.floor_size == "1 200"
        assert listing.agent_name == "Jane Smith"
        assert listing.agent_phone == "021 555 1234"
        assert listing.agent_email == "jane@coastalrealty.co.za"
        assert listing.agency_name == "Coastal Realty"
        assert listing.suburb == "Sea Point"
        assert listing.city == "Cape Town"
        assert listing.province == "Western Cape"
        assert listing.source == "property24"

    def test_missing_fields_are_empty(self, extractor, property24_html):
        """Test missing fields are empty."""
        listing = extractor.extract(property24_html, ListingSource.PROPERTY24)

        assert listing.listing_date == ""
        assert listing.listing_id == ""

    def test_features_trimmed_without_blanks(self, extractor, property24_html):
        """Test features trimmed without blanks."""
        listing = extractor.extract(property24_html, ListingSource.PROPERTY24)
        assert listing.features == ["Pool", "Garden", "Sea views"]

    def test_images_absolute_and_unique(self, extractor, property24_html):
        """Test images absolute and unique."""
        listing = extractor.extract(property24_html, ListingSource.PROPERTY24)
        assert listing.images == [
            "https://images.prop24.com/1.jpg",
            "https://images.prop24.com/2.jpg",
        ]

    def test_images_capped(self, extractor):
        """Test images capped."""
        imgs = "".join(
            f'<img src="https://cdn.example.com/{i}.jpg">' for i in range(15)
        )
        html = f'<html><body><div class="gallery">{imgs}</div></body></html>'

        listing = extractor.extract(html, ListingSource.GENERIC)

        assert len(listing.images) == 10
        assert listing.images[0] == "https://cdn.example.com/0.jpg"

    def test_generic_fallback_with_keyword_scan(self, extractor, generic_html):
        """Test generic fallback with keyword scan."""
        listing = extractor.extract(generic_html, ListingSource.SEEFF)

        assert listing.title == "Modern Apartment"
        assert listing.price == "R1,850,000"
        assert listing.address == "5 Main Road, Stellenbosch"
        assert listing.bedrooms == "2"
        assert listing.bathrooms == "1"
        assert listing.garages == ""
        assert listing.images == [
            "https://cdn.example.com/a.jpg",
            "https://cdn.example.com/og.jpg",
        ]
        assert listing.source == "seeff"

    def test_structured_selector_beats_keyword_text(self, extractor):
        """Test structured selector beats keyword text."""
        html = """
        <html><body>
            <p>Part of a 3 bedroom community nearby</p>
            <span class="bedrooms">4</span>
        </body></html>
        """
        listing = extractor.extract(html, ListingSource.GENERIC)
        assert listing.bedrooms == "4"

    def test_scripts_are_ignored(self, extractor):
        """Test scripts are ignored."""
        html = """
        <html><body>
            <script>var note = "7 bedroom";</script>
            <h1>Cottage</h1>
        </body></html>
        """
        listing = extractor.extract(html, ListingSource.GENERIC)
        assert listing.bedrooms == ""

    def test_bytes_input(self, extractor, property24_html):
        """Test extraction from undecoded bytes."""
        listing = extractor.extract(property24_html.encode("utf-8"), ListingSource.PROPERTY24)
        assert listing.price == "R 4 250 000"

    def test_empty_document(self, extractor):
        """Test an empty document yields an empty listing."""
        listing = extractor.extract("", ListingSource.GENERIC)
        assert listing.title == ""
        assert listing.features == []
        assert listing.images == []

    @pytest.mark.parametrize("bad_input", [None, 123, ["<html>"]])
    def test_unparseable_input(self, extractor, bad_input):
        """Test unparseable input."""
        with pytest.raises(ParseError):
            extractor.extract(bad_input, ListingSource.GENERIC)
