"""
Listing field extractor built on BeautifulSoup.

Applies ordered selector candidates per field and returns the first non-empty
match. A missing field is never an error: it stays empty.
"""

import re
from typing import Callable, List, Optional, Union

from bs4 import BeautifulSoup, Comment
from bs4.element import Tag
from soupsieve import SelectorSyntaxError

from listing_pipeline.config import get_settings, get_service_logger
from listing_pipeline.core.exceptions import ParseError
from listing_pipeline.models import ExtractedListing, ListingSource

from .selector_tables import DETAIL_KEYWORDS, selectors_for
from .web_scraper_utils import WebScraperUtils


logger = get_service_logger(__name__)
settings = get_settings()

TEXT_FIELDS = (
    "title",
    "price",
    "address",
    "description",
    "property_type",
    "agent_name",
    "agent_phone",
    "agent_email",
    "agency_name",
    "suburb",
    "city",
    "province",
    "listing_date",
)

COUNT_FIELDS = ("bedrooms", "bathrooms", "garages")
SIZE_FIELDS = ("erf_size", "floor_size")

IMAGE_ATTRIBUTES = ("src", "data-src", "data-lazy-src", "content")
IMAGE_SKIP_MARKERS = ("placeholder", "loading")

# Ancestors checked above a keyword hit when looking for its number.
KEYWORD_SCAN_DEPTH = 2


class FieldExtractor:
    """
    Extracts an ExtractedListing from raw listing HTML.

    One parse per call; the per-source selector tables decide which
    candidates are tried and in which order.
    """

    def __init__(self, max_images: Optional[int] = None):
        self.max_images = max_images or settings.max_extracted_images

    def extract(
        self, raw_html: Union[str, bytes], source: ListingSource
    ) -> ExtractedListing:
        """
        Extract every listing field from ``raw_html``.

        Args:
            raw_html: Page HTML as fetched
            source: Resolved listing source, selects the selector table

        Returns:
            A fully-shaped ExtractedListing; fields not found are empty

        Raises:
            ParseError: If the input cannot be parsed into a document
        """
        soup = self._parse(raw_html)
        self._clean_soup(soup)

        data = {}
        for field in TEXT_FIELDS:
            data[field] = self._extract_text(soup, selectors_for(source, field))

        for field in COUNT_FIELDS:
            data[field] = self._extract_detail(
                soup, source, field, WebScraperUtils.first_digit_run
            )
        for field in SIZE_FIELDS:
            data[field] = self._extract_detail(
                soup, source, field, WebScraperUtils.first_number_text
            )

        data["features"] = self._extract_features(soup, selectors_for(source, "features"))
        data["images"] = self._extract_images(soup, selectors_for(source, "images"))

        listing = ExtractedListing(**data, source=source.value)
        logger.debug(
            "Extracted listing fields",
            source=source.value,
            filled=[name for name, value in data.items() if value],
        )
        return listing

    def _parse(self, raw_html: Union[str, bytes]) -> BeautifulSoup:
        if not isinstance(raw_html, (str, bytes)):
            raise ParseError(
                f"Cannot parse HTML from {type(raw_html).__name__}",
                context={"type": type(raw_html).__name__},
            )
        try:
            return BeautifulSoup(raw_html, "html.parser")
        except Exception as e:
            raise ParseError(f"Failed to parse listing HTML: {e}") from e

    def _clean_soup(self, soup: BeautifulSoup) -> None:
        """Remove non-content elements and comments before text queries."""
        for element in soup(["script", "style", "noscript", "template"]):
            element.decompose()

        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

    def _select(self, soup: BeautifulSoup, selector: str) -> List[Tag]:
        try:
            return soup.select(selector)
        except (SelectorSyntaxError, NotImplementedError, ValueError) as e:
            logger.debug(f"Skipping invalid selector {selector!r}: {e}")
            return []

    def _extract_text(self, soup: BeautifulSoup, selectors: List[str]) -> str:
        """Text of the first selector that matches a non-empty node."""
        for selector in selectors:
            for element in self._select(soup, selector)[:1]:
                text = WebScraperUtils.collapse_whitespace(
                    element.get_text(" ", strip=True)
                )
                if text:
                    return text
        return ""

    def _extract_detail(
        self,
        soup: BeautifulSoup,
        source: ListingSource,
        field: str,
        pick: Callable[[str], str],
    ) -> str:
        """Structured selectors first, keyword scan only as last resort."""
        for selector in selectors_for(source, field):
            for element in self._select(soup, selector)[:1]:
                value = pick(element.get_text(" ", strip=True))
                if value:
                    return value

        return self._keyword_scan(soup, DETAIL_KEYWORDS[field], pick)

    def _keyword_scan(
        self, soup: BeautifulSoup, keyword: str, pick: Callable[[str], str]
    ) -> str:
        """
        Find the first text node matching ``keyword`` and pull a number from it
        or from one of its nearest ancestors.

        Marketing copy such as "3 bedroom community nearby" can match here;
        structured selectors are always tried before this scan.
        """
        pattern = re.compile(keyword, re.I)
        for node in soup.find_all(string=pattern):
            element = node.parent
            depth = 0
            while element is not None and depth <= KEYWORD_SCAN_DEPTH:
                if element.name in ("[document]", "html", "body"):
                    break
                value = pick(element.get_text(" ", strip=True))
                if value:
                    return value
                element = element.parent
                depth += 1
        return ""

    def _extract_features(self, soup: BeautifulSoup, selectors: List[str]) -> List[str]:
        """All non-empty feature nodes across every candidate container selector."""
        features: List[str] = []
        seen_nodes = set()
        for selector in selectors:
            for element in self._select(soup, selector):
                if id(element) in seen_nodes:
                    continue
                seen_nodes.add(id(element))
                text = WebScraperUtils.collapse_whitespace(
                    element.get_text(" ", strip=True)
                )
                if text:
                    features.append(text)
        return features

    def _extract_images(self, soup: BeautifulSoup, selectors: List[str]) -> List[str]:
        """
        Absolute image URLs from the gallery selectors, capped at ``max_images``.

        Relative URLs are dropped rather than resolved; callers that know the
        page URL can resolve them themselves.
        """
        images: List[str] = []
        for selector in selectors:
            for element in self._select(soup, selector):
                src = self._image_source(element)
                if not src or src in images:
                    continue
                images.append(src)
                if len(images) >= self.max_images:
                    return images
        return images

    def _image_source(self, element: Tag) -> str:
        for attribute in IMAGE_ATTRIBUTES:
            value = element.get(attribute)
            if not isinstance(value, str):
                continue
            value = value.strip()
            if not value.startswith("http"):
                continue
            if any(marker in value.lower() for marker in IMAGE_SKIP_MARKERS):
                continue
            return value
        return ""


# Global extractor instance
field_extractor = FieldExtractor()


def get_field_extractor() -> FieldExtractor:
    return field_extractor
