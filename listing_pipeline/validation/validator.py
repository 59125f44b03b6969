"""
Listing validator and normalizer.

Turns an ExtractedListing into a ValidationReport. Field-level problems are
data, not exceptions: every stage appends to ``errors`` (blocking) or
``warnings`` (advisory) and the caller always receives a report.

Stages run in a fixed order and the report lists messages in that order:

1. required fields (short-circuits on failure)
2. title
3. price
4. address
5. property detail numerics
6. agent info
7. images
8. features
9. completeness (only when partial data is not allowed)
"""

import math
import re
from typing import List, Optional

from listing_pipeline.config import get_settings, get_service_logger
from listing_pipeline.models import ExtractedListing, ValidationOptions, ValidationReport
from listing_pipeline.scraping.web_scraper_utils import WebScraperUtils


logger = get_service_logger(__name__)
settings = get_settings()

REQUIRED_FIELDS = ["title", "address", "listing_id"]
STRICT_REQUIRED_FIELDS = ["price", "bedrooms", "bathrooms"]
ESSENTIAL_FIELDS = ["title", "price", "address", "bedrooms", "bathrooms"]

COUNT_FIELDS = ["bedrooms", "bathrooms", "garages"]
SIZE_FIELDS = ["erf_size", "floor_size"]
AGENT_FIELDS = ["agent_name", "agent_phone", "agent_email"]

TITLE_PLACEHOLDERS = ["test", "dummy"]
FEATURE_PLACEHOLDERS = ["test", "dummy", "sample"]

# Advisory geofence only: a miss is a warning.
KNOWN_LOCALITIES = [
    "cape town",
    "johannesburg",
    "durban",
    "pretoria",
    "port elizabeth",
    "gqeberha",
    "bloemfontein",
    "east london",
    "kimberley",
    "upington",
    "george",
    "stellenbosch",
    "paarl",
    "worcester",
    "knysna",
    "jeffreys bay",
    "sandton",
    "centurion",
    "umhlanga",
    "somerset west",
]

PHONE_RE = re.compile(r"^(\+27|0)[1-8][0-9]{8}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
LEADING_NUMBER_RE = re.compile(r"^(\d+(?:\.\d+)?)")
# A minus sign directly before the first number, e.g. "-50 m²" or "Erf: -50".
NEGATIVE_NUMBER_RE = re.compile(r"^\D*(?<!\w)-\d")


class ListingValidator:
    """
    Stateless listing validator.

    Thresholds are fixed at construction; options are passed per call. The
    input listing is never mutated: auto-correction works on a deep copy.
    """

    TITLE_MIN_LENGTH = 5
    TITLE_MAX_LENGTH = 200
    PRICE_LOW = 100_000
    PRICE_HIGH = 100_000_000
    MAX_ROOM_COUNT = 20
    MAX_AREA_SQM = 10_000

    def __init__(self, max_images: Optional[int] = None):
        self.max_images = max_images or settings.max_validated_images

    def validate(
        self,
        extracted: ExtractedListing,
        options: Optional[ValidationOptions] = None,
    ) -> ValidationReport:
        """
        Validate and sanitize an extracted listing.

        Args:
            extracted: Listing as produced by the extractor
            options: Strict mode, partial-data and auto-correct switches

        Returns:
            ValidationReport; ``sanitized_data`` is set only when valid
        """
        options = options or ValidationOptions()
        errors: List[str] = []
        warnings: List[str] = []
        data = extracted.model_copy(deep=True)

        if not self._validate_required_fields(data, errors, options.strict_mode):
            logger.info(
                "Listing rejected: required fields missing",
                listing_id=data.listing_id,
                errors=errors,
            )
            return ValidationReport(
                is_valid=False, errors=errors, warnings=warnings, sanitized_data=None
            )

        auto_correct = options.auto_correct
        self._validate_title(data, errors, warnings, auto_correct)
        self._validate_price(data, errors, warnings, auto_correct)
        self._validate_address(data, errors, warnings, auto_correct)
        self._validate_property_details(data, errors, warnings, auto_correct)
        self._validate_agent_info(data, errors, warnings, auto_correct)
        self._validate_images(data, errors, warnings, auto_correct)
        self._validate_features(data, errors, warnings, auto_correct)

        if not options.allow_partial_data:
            missing = [f for f in ESSENTIAL_FIELDS if not getattr(data, f).strip()]
            if missing:
                errors.append(
                    "Property data is incomplete. Missing essential fields: "
                    + ", ".join(missing)
                )

        is_valid = not errors
        logger.debug(
            "Listing validated",
            listing_id=data.listing_id,
            is_valid=is_valid,
            errors=len(errors),
            warnings=len(warnings),
        )
        return ValidationReport(
            is_valid=is_valid,
            errors=errors,
            warnings=warnings,
            sanitized_data=data if is_valid else None,
        )

    def _validate_required_fields(
        self, data: ExtractedListing, errors: List[str], strict_mode: bool
    ) -> bool:
        required = REQUIRED_FIELDS + (STRICT_REQUIRED_FIELDS if strict_mode else [])
        for field in required:
            if not getattr(data, field).strip():
                errors.append(f"Required field '{field}' is missing or empty")
        return not errors

    def _validate_title(
        self,
        data: ExtractedListing,
        errors: List[str],
        warnings: List[str],
        auto_correct: bool,
    ) -> None:
        title = WebScraperUtils.collapse_whitespace(data.title)
        if auto_correct:
            data.title = title

        if len(title) < self.TITLE_MIN_LENGTH:
            warnings.append("Property title is very short")
        elif len(title) > self.TITLE_MAX_LENGTH:
            if auto_correct:
                cut = self.TITLE_MAX_LENGTH - len("...")
                data.title = title[:cut].rstrip() + "..."
                warnings.append(
                    f"Property title was truncated to {self.TITLE_MAX_LENGTH} characters"
                )
            else:
                errors.append(
                    f"Property title is too long (max {self.TITLE_MAX_LENGTH} characters)"
                )

        if WebScraperUtils.contains_placeholder(data.title, TITLE_PLACEHOLDERS):
            warnings.append("Property title appears to be test data")

    def _validate_price(
        self,
        data: ExtractedListing,
        errors: List[str],
        warnings: List[str],
        auto_correct: bool,
    ) -> None:
        if not data.price.strip():
            return

        value = WebScraperUtils.parse_number(data.price)
        if value is None:
            errors.append("Unable to extract numeric price from data")
            return

        if value < self.PRICE_LOW:
            warnings.append("Price seems unusually low for South African property market")
        elif value > self.PRICE_HIGH:
            warnings.append("Price seems unusually high - please verify")

        if auto_correct:
            data.price = format_price(value)

    def _validate_address(
        self,
        data: ExtractedListing,
        errors: List[str],
        warnings: List[str],
        auto_correct: bool,
    ) -> None:
        address = WebScraperUtils.collapse_whitespace(data.address)
        if auto_correct:
            data.address = address

        address_lower = address.lower()
        if not any(locality in address_lower for locality in KNOWN_LOCALITIES):
            warnings.append("Address may not be in South Africa - please verify location")

    def _validate_property_details(
        self,
        data: ExtractedListing,
        errors: List[str],
        warnings: List[str],
        auto_correct: bool,
    ) -> None:
        for field in COUNT_FIELDS:
            raw = getattr(data, field).strip()
            if not raw:
                continue

            match = LEADING_NUMBER_RE.match(raw)
            if not match:
                errors.append(f"Invalid {field} value: {raw}")
                continue

            value = float(match.group(1))
            if not math.isfinite(value):
                errors.append(f"Invalid {field} value: {raw}")
                continue

            count = int(value)
            if auto_correct:
                setattr(data, field, str(count))

            if count > self.MAX_ROOM_COUNT:
                warnings.append(f"{field} count seems unusually high: {count}")

        for field in SIZE_FIELDS:
            raw = getattr(data, field).strip()
            if not raw:
                continue

            size = WebScraperUtils.parse_number(raw)
            if size is None or NEGATIVE_NUMBER_RE.match(raw):
                errors.append(f"Invalid {field} value: {raw}")
                continue

            if size > self.MAX_AREA_SQM:
                warnings.append(f"{field} seems unusually large: {size:g} sqm")

    def _validate_agent_info(
        self,
        data: ExtractedListing,
        errors: List[str],
        warnings: List[str],
        auto_correct: bool,
    ) -> None:
        phone = WebScraperUtils.collapse_whitespace(data.agent_phone)
        if phone:
            # Formats vary between agencies, so a mismatch is only a warning.
            if not PHONE_RE.match(re.sub(r"[\s\-().]", "", phone)):
                warnings.append("Agent phone number format may be invalid")
            if auto_correct:
                data.agent_phone = phone

        email = data.agent_email.strip()
        if email:
            if not EMAIL_RE.match(email):
                errors.append("Invalid agent email format")
            elif auto_correct:
                data.agent_email = email

        filled = [field for field in AGENT_FIELDS if getattr(data, field).strip()]
        if not filled:
            warnings.append("No agent information found")
        elif len(filled) < len(AGENT_FIELDS):
            warnings.append("Agent information is incomplete")

    def _validate_images(
        self,
        data: ExtractedListing,
        errors: List[str],
        warnings: List[str],
        auto_correct: bool,
    ) -> None:
        candidates = [url.strip() for url in data.images]
        valid = [url for url in candidates if WebScraperUtils.is_absolute_http_url(url)]

        removed = len(candidates) - len(valid)
        if removed:
            noun = "URL was" if removed == 1 else "URLs were"
            warnings.append(f"{removed} invalid image {noun} removed")

        data.images = WebScraperUtils.unique(valid)[: self.max_images]

        if not data.images:
            warnings.append("No valid property images found")

    def _validate_features(
        self,
        data: ExtractedListing,
        errors: List[str],
        warnings: List[str],
        auto_correct: bool,
    ) -> None:
        if auto_correct:
            trimmed = [feature.strip() for feature in data.features]
            data.features = WebScraperUtils.unique(f for f in trimmed if f)
        elif len(set(data.features)) != len(data.features):
            warnings.append("Property features contain duplicate entries")

        if any(
            WebScraperUtils.contains_placeholder(feature, FEATURE_PLACEHOLDERS)
            for feature in data.features
        ):
            warnings.append("Some features appear to be test data")


def format_price(value: float) -> str:
    """Canonical price string: ``R 1,200,000`` (cents only when non-zero)."""
    if value == int(value):
        return f"R {int(value):,}"
    return f"R {value:,.2f}"


# Global validator instance
listing_validator = ListingValidator()


def validate_listing(
    extracted: ExtractedListing, options: Optional[ValidationOptions] = None
) -> ValidationReport:
    """Validate ``extracted`` with the shared validator."""
    return listing_validator.validate(extracted, options)
