"""
Unit tests for the listing mapper.
"""

from datetime import datetime, timezone

import pytest

from listing_pipeline.services import (
    price_range,
    target_market,
    to_storage_record,
    to_template_data,
)
from listing_pipeline.validation import validate_listing


@pytest.mark.parametrize(
    "price,expected",
    [
        ("R 7,500,000", "Luxury"),
        ("R 5,000,000", "Luxury"),
        ("R 2,450,000", "Premium"),
        ("R 1,000,000", "Mid-Range"),
        ("R 650 000", "Affordable"),
        ("R 499,999", "Budget"),
        ("", "Budget"),
        (3_000_000, "Premium"),
    ],
)
def test_price_range(price, expected):
    """Test price band thresholds."""
    assert price_range(price) == expected


@pytest.mark.parametrize(
    "bedrooms,expected",
    [
        ("5", "Families"),
        ("4", "Families"),
        ("3", "Growing Families"),
        ("2", "Couples & Young Families"),
        ("1", "First-Time Buyers"),
        ("", "First-Time Buyers"),
        (3, "Growing Families"),
    ],
)
def test_target_market(bedrooms, expected):
    """Test target market by bedroom count."""
    assert target_market(bedrooms) == expected


class TestListingMapper:
    """Test cases for storage and template mapping."""

    @pytest.fixture
    def sanitized(self, valid_listing):
        return validate_listing(valid_listing).sanitized_data

    def test_to_storage_record(self, sanitized, property24_url):
        """Test mapping to the storage schema."""
        imported_at = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

        record = to_storage_record(sanitized, imported_at=imported_at)

        assert record["price"] == 4250000.0
        assert record["price_range"] == "Premium"
        assert record["bedrooms"] == 3
        assert record["bathrooms"] == 2
        assert record["garages"] == 1
        assert record["square_footage"] == 1200
        assert record["location"] == {
            "address": "12 Beach Road, Sea Point, Cape Town",
            "suburb": "Sea Point",
            "city": "Cape Town",
            "province": "Western Cape",
        }
        assert record["images"] == [
            {"url": "https://images.prop24.com/1.jpg", "order": 0},
            {"url": "https://images.prop24.com/2.jpg", "order": 1},
        ]
        assert record["agent_info"]["agency_name"] == "Coastal Realty"
        assert record["source_data"] == {
            "listing_id": "116123456",
            "source": "property24",
            "original_url": property24_url,
            "listing_date": "",
            "imported_at": "2025-03-01T12:00:00+00:00",
        }
        assert record["target_market"] == "Growing Families"
        assert record["neighborhood_highlights"] == "Sea Point, Cape Town"
        assert record["unique_selling_points"] == "Pool, Garden, Sea views"

    def test_storage_record_defaults(self, valid_listing):
        """Test storage record defaults."""
        listing = valid_listing.model_copy(
            update={"property_type": "", "floor_size": "", "garages": ""}
        )

        record = to_storage_record(listing, original_url="https://example.com/x")

        assert record["property_type"] == "Residential"
        assert record["square_footage"] == 450
        assert record["garages"] == 0
        assert record["source_data"]["original_url"] == "https://example.com/x"

    def test_to_template_data(self, sanitized):
        """Test mapping to marketing template fields."""
        data = to_template_data(sanitized)

        assert data["price"] == "R 4,250,000"
        assert data["features"] == "Pool, Garden, Sea views, Double garage"
        assert data["price_range"] == "Premium"
        assert data["target_market"] == "Growing Families"
        assert data["listing_id"] == "116123456"
        assert data["images"] == sanitized.images
