"""
Source resolution for listing URLs.

Maps a URL onto a known ListingSource by host and pulls the site's canonical
listing identifier out of the URL path.
"""

import re
from typing import Dict, List, Optional, Pattern, Tuple
from urllib.parse import urlparse

from listing_pipeline.config import get_service_logger
from listing_pipeline.models import ListingSource


logger = get_service_logger(__name__)

SAFE_SCHEMES = {"http", "https"}

# Ordered: "property.co.za" is a substring of "privateproperty.co.za".
SOURCE_DOMAINS: List[Tuple[str, ListingSource]] = [
    ("property24.com", ListingSource.PROPERTY24),
    ("privateproperty.co.za", ListingSource.PRIVATE_PROPERTY),
    ("gumtree.co.za", ListingSource.GUMTREE),
    ("property.co.za", ListingSource.PROPERTY_CO_ZA),
    ("seeff.com", ListingSource.SEEFF),
    ("remax.co.za", ListingSource.REMAX),
    ("pamgolding.co.za", ListingSource.PAM_GOLDING),
]

# Broad patterns go last: a bare digit run can be a page index or a price.
_FALLBACK_ID_PATTERN = re.compile(r"(\d{8,})")

_TRAILING_ID_PATTERN = re.compile(r"^https?://[^/?#]+[^?#]*/(\d{5,})/?(?:[?#]|$)", re.I)

LISTING_ID_PATTERNS: Dict[ListingSource, List[Pattern[str]]] = {
    ListingSource.PROPERTY24: [
        re.compile(r"property24\.com/[^/?#]+/[^/?#]+/[^/?#]+/(\d+)(?:[/?#]|$)", re.I),
        re.compile(r"property24\.com/[^/?#]+/(\d+)(?:[/?#]|$)", re.I),
        re.compile(r"property24\.com/[^?#]*/(\d+)/?(?:[?#]|$)", re.I),
        _FALLBACK_ID_PATTERN,
    ],
    ListingSource.PRIVATE_PROPERTY: [
        re.compile(r"^https?://[^/?#]+[^?#]*/(T\d+)/?(?:[?#]|$)", re.I),
        _TRAILING_ID_PATTERN,
        _FALLBACK_ID_PATTERN,
    ],
}

DEFAULT_ID_PATTERNS: List[Pattern[str]] = [_TRAILING_ID_PATTERN, _FALLBACK_ID_PATTERN]


class SourceResolver:
    """
    Classifies listing URLs and extracts their listing identifiers.

    Stateless; a single shared instance is exposed as ``source_resolver``.
    """

    def resolve(self, url: str) -> ListingSource:
        """Return the ListingSource for ``url``, or GENERIC when no domain matches."""
        host = self._hostname(url)
        if not host:
            return ListingSource.GENERIC

        for domain, source in SOURCE_DOMAINS:
            if domain in host:
                return source
        return ListingSource.GENERIC

    def extract_listing_id(
        self, url: str, source: Optional[ListingSource] = None
    ) -> Optional[str]:
        """
        Extract the source-specific listing identifier from ``url``.

        Args:
            url: Listing URL
            source: Already-resolved source, so the URL is not classified twice

        Returns:
            The first identifier matched by the source's ordered patterns, or None
        """
        if not url or not isinstance(url, str):
            return None

        source = source or self.resolve(url)
        for pattern in LISTING_ID_PATTERNS.get(source, DEFAULT_ID_PATTERNS):
            match = pattern.search(url)
            if match and match.group(1):
                return match.group(1)

        logger.debug(f"No listing id found in URL: {url}")
        return None

    def is_supported_url(self, url: str) -> bool:
        """True when ``url`` is an http(s) URL on one of the known listing sites."""
        if not self._is_safe_url(url):
            return False
        return self.resolve(url) is not ListingSource.GENERIC

    @staticmethod
    def _is_safe_url(url: str) -> bool:
        try:
            parsed = urlparse(url)
            return parsed.scheme in SAFE_SCHEMES and bool(parsed.netloc)
        except (TypeError, ValueError, AttributeError):
            return False

    @staticmethod
    def _hostname(url: str) -> str:
        try:
            return (urlparse(url).hostname or "").lower()
        except (TypeError, ValueError, AttributeError):
            return ""


# Global resolver instance
source_resolver = SourceResolver()


def get_source_resolver() -> SourceResolver:
    return source_resolver
