# ┌───────────────────────────────────────────────────────────────┐
# │  Copyright (c) 2025 Ateet Vatan Bahmani                       │
# │  Project: MASX AI – Listing Extraction Pipeline               │
# │  All rights reserved.                                         │
# └───────────────────────────────────────────────────────────────┘
#
# MASX AI is a proprietary software system developed and owned by Ateet Vatan Bahmani.
# The source code, documentation, workflows, designs, and naming (including "MASX AI")
# are protected by applicable copyright and trademark laws.
#
# Redistribution, modification, commercial use, or publication of any portion of this
# project without explicit written consent is strictly prohibited.
#
# This project is not open-source and is intended solely for internal, research,
# or demonstration use by the author.
#
# Contact: ab@masxai.com | MASXAI.com

"""
HTTP fetcher for listing pages.

Uses httpx with a browser user agent, a finite timeout and a bounded redirect
count. Requests can be routed through a relay endpoint that proxies the target
URL verbatim, or through an outbound HTTP proxy.
"""

import time
from typing import Dict, Optional
from urllib.parse import quote

import httpx

from listing_pipeline.config import get_settings, get_service_logger
from listing_pipeline.core.exceptions import FetchError
from listing_pipeline.models import RawDocument


logger = get_service_logger("ListingFetcher")
settings = get_settings()


class ListingFetcher:
    """
    Fetches raw listing HTML.

    There is no retry loop: a failed fetch raises FetchError and the caller
    decides whether and when to try again.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        min_body_bytes: Optional[int] = None,
        relay_url: Optional[str] = None,
        proxy: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the fetcher; unset arguments fall back to settings."""
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.max_redirects = (
            max_redirects if max_redirects is not None else settings.max_redirects
        )
        self.min_body_bytes = (
            min_body_bytes if min_body_bytes is not None else settings.min_body_bytes
        )
        self.relay_url = relay_url if relay_url is not None else settings.relay_url
        self.proxy = proxy if proxy is not None else settings.http_proxy
        self.transport = transport

        self.headers: Dict[str, str] = {
            "User-Agent": settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }

    def request_url(self, url: str) -> str:
        """The URL actually requested: the target itself, or the relay wrapping it."""
        if self.relay_url:
            return f"{self.relay_url}{quote(url, safe='')}"
        return url

    def _client(self) -> httpx.AsyncClient:
        kwargs = {
            "headers": self.headers,
            "timeout": httpx.Timeout(self.timeout),
            "follow_redirects": True,
            "max_redirects": self.max_redirects,
        }
        if self.transport is not None:
            kwargs["transport"] = self.transport
        elif self.proxy:
            proxy = self.proxy
            kwargs["proxy"] = proxy if proxy.startswith("http") else f"http://{proxy}"
        return httpx.AsyncClient(**kwargs)

    async def fetch(self, url: str) -> RawDocument:
        """
        Fetch the listing page at ``url``.

        Args:
            url: Listing URL

        Returns:
            RawDocument with the decoded HTML and fetch metadata

        Raises:
            FetchError: On network failure, timeout, too many redirects,
                non-2xx status, or a body too small to be a listing page
        """
        target = self.request_url(url)
        started = time.time()
        logger.info(f"Fetching listing page: {url}", relayed=bool(self.relay_url))

        try:
            async with self._client() as client:
                response = await client.get(target)
        except httpx.TimeoutException as e:
            raise FetchError(
                f"Timed out after {self.timeout}s fetching {url}", context={"url": url}
            ) from e
        except httpx.TooManyRedirects as e:
            raise FetchError(
                f"Too many redirects (>{self.max_redirects}) fetching {url}",
                context={"url": url},
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(
                f"Unable to connect while fetching {url}: {e}", context={"url": url}
            ) from e

        if not response.is_success:
            raise FetchError(
                f"HTTP error {response.status_code} fetching {url}",
                status_code=response.status_code,
                context={"url": url},
            )

        body = response.content
        if len(body) < self.min_body_bytes:
            raise FetchError(
                f"Response from {url} too small to be a listing page "
                f"({len(body)} bytes < {self.min_body_bytes})",
                status_code=response.status_code,
                context={"url": url},
            )

        final_url = url if self.relay_url else str(response.url)
        logger.info(
            f"Fetched listing page: {url}",
            status_code=response.status_code,
            bytes=len(body),
            final_url=final_url,
            elapsed=round(time.time() - started, 3),
        )
        return RawDocument(
            html=response.text,
            status_code=response.status_code,
            final_url=final_url,
            byte_length=len(body),
        )


# Global fetcher instance
listing_fetcher = ListingFetcher()


def get_listing_fetcher() -> ListingFetcher:
    return listing_fetcher
