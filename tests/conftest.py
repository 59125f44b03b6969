"""
Pytest configuration and fixtures for Listing Extraction Pipeline tests.

Provides sample listing pages, listings and mocked collaborators shared by
all test modules.
"""

import pytest
from unittest.mock import AsyncMock

from listing_pipeline.models import ExtractedListing, RawDocument


PROPERTY24_URL = (
    "https://www.property24.com/for-sale/sea-point/cape-town/western-cape/432/116123456"
)

PROPERTY24_HTML = """
<html>
    <head>
        <title>3 Bedroom House for Sale in Sea Point | Property24</title>
        <script>var promo = "5 bedroom penthouse";</script>
    </head>
    <body>
        <h1 class="p24_propertyTitle">  3 Bedroom   House in Sea Point </h1>
        <div class="p24_price">R 4 250 000</div>
        <div class="p24_address">12 Beach Road, Sea Point, Cape Town</div>
        <div class="p24_description">Light-filled family home close to the promenade.</div>
        <div class="p24_propertyType">House</div>
        <ul class="p24_featureDetails">
            <li class="bedrooms">3 Bedrooms</li>
            <li class="bathrooms">2 Bathrooms</li>
            <li class="garages">1 Garage</li>
        </ul>
        <div data-cy="listing-erf-size">Erf Size 450 m²</div>
        <div data-cy="listing-floor-size">Floor Size 1 200 m²</div>
        <div class="p24_agentName">Jane Smith</div>
        <div class="p24_agentPhone">021 555 1234</div>
        <div class="p24_agentEmail">jane@coastalrealty.co.za</div>
        <div class="p24_agencyName">Coastal Realty</div>
        <span class="p24_suburb">Sea Point</span>
        <span class="p24_city">Cape Town</span>
        <span class="p24_province">Western Cape</span>
        <ul class="p24_features">
            <li>Pool</li>
            <li> Garden </li>
            <li></li>
            <li>Sea views</li>
        </ul>
        <div class="p24_gallery">
            <img src="https://images.prop24.com/1.jpg">
            <img data-src="https://images.prop24.com/2.jpg">
            <img src="/relative/3.jpg">
            <img src="https://images.prop24.com/placeholder.gif">
            <img src="https://images.prop24.com/1.jpg">
        </div>
    </body>
</html>
"""

GENERIC_HTML = """
<html>
    <body>
        <h1>Modern Apartment</h1>
        <div class="price">R1,850,000</div>
        <div class="address">5 Main Road, Stellenbosch</div>
        <div class="specs">
            <div><span>Bedrooms</span> <span>2</span></div>
            <div><span>Bathrooms</span> <span>1</span></div>
        </div>
        <div class="gallery"><img src="https://cdn.example.com/a.jpg"></div>
        <meta property="og:image" content="https://cdn.example.com/og.jpg">
    </body>
</html>
"""


@pytest.fixture
def property24_url():
    return PROPERTY24_URL


@pytest.fixture
def property24_html():
    return PROPERTY24_HTML


@pytest.fixture
def generic_html():
    return GENERIC_HTML


@pytest.fixture
def make_document():
    """Factory for RawDocument instances wrapping a page body."""

    def _make(html: str = PROPERTY24_HTML, url: str = PROPERTY24_URL) -> RawDocument:
        return RawDocument(
            html=html,
            status_code=200,
            final_url=url,
            byte_length=len(html.encode("utf-8")),
        )

    return _make


@pytest.fixture
def valid_listing():
    """A listing that passes validation without warnings."""
    return ExtractedListing(
        title="3 Bedroom House in Sea Point",
        price="R 4 250 000",
        address="12 Beach Road, Sea Point, Cape Town",
        description="Light-filled family home close to the promenade.",
        bedrooms="3",
        bathrooms="2",
        garages="1",
        erf_size="450",
        floor_size="1 200",
        property_type="House",
        agent_name="Jane Smith",
        agent_phone="021 555 1234",
        agent_email="jane@coastalrealty.co.za",
        agency_name="Coastal Realty",
        features=["Pool", "Garden", "Sea views", "Double garage"],
        images=["https://images.prop24.com/1.jpg", "https://images.prop24.com/2.jpg"],
        suburb="Sea Point",
        city="Cape Town",
        province="Western Cape",
        listing_id="116123456",
        source="property24",
        listing_url=PROPERTY24_URL,
    )


@pytest.fixture
def fake_sleep():
    """Stand-in for asyncio.sleep that returns immediately."""
    return AsyncMock(return_value=None)
