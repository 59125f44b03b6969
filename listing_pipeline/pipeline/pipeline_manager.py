"""
Pipeline manager for the Listing Extraction Pipeline.

Chains resolve → fetch → extract → validate for one URL and runs that chain
over a batch of URLs with politeness pacing and per-item failure isolation.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from listing_pipeline.config import get_service_logger, get_settings
from listing_pipeline.config.logging_config import log_pipeline_step
from listing_pipeline.core.exceptions import ListingPipelineException, UnsupportedUrlError
from listing_pipeline.models import (
    BatchResult,
    BatchSummary,
    ExtractedListing,
    ValidationOptions,
    ValidationReport,
)
from listing_pipeline.scraping import (
    FieldExtractor,
    ListingFetcher,
    SourceResolver,
    get_field_extractor,
    get_listing_fetcher,
    get_source_resolver,
)
from listing_pipeline.validation import ListingValidator, listing_validator


logger = get_service_logger(__name__)
settings = get_settings()

SleepFunc = Callable[[float], Awaitable[None]]


class HostPacer:
    """
    Per-host politeness gate for concurrent batches.

    At most one request per host is in flight, and consecutive request starts
    to the same host are at least ``delay`` seconds apart.
    """

    def __init__(
        self,
        delay: float,
        sleep: SleepFunc = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.delay = delay
        self._sleep = sleep
        self._clock = clock
        self._locks: Dict[str, asyncio.Lock] = {}
        self._last_start: Dict[str, float] = {}

    @asynccontextmanager
    async def slot(self, host: str):
        lock = self._locks.setdefault(host, asyncio.Lock())
        async with lock:
            last = self._last_start.get(host)
            if last is not None:
                wait = self.delay - (self._clock() - last)
                if wait > 0:
                    await self._sleep(wait)
            self._last_start[host] = self._clock()
            yield


class ListingPipeline:
    """
    Orchestrates the listing pipeline for single URLs and batches.

    Collaborators are injected so tests can swap the network-facing fetcher;
    by default the shared module instances are used.
    """

    def __init__(
        self,
        resolver: Optional[SourceResolver] = None,
        fetcher: Optional[ListingFetcher] = None,
        extractor: Optional[FieldExtractor] = None,
        validator: Optional[ListingValidator] = None,
        batch_delay: Optional[float] = None,
        max_concurrency: Optional[int] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize the pipeline."""
        self.resolver = resolver or get_source_resolver()
        self.fetcher = fetcher or get_listing_fetcher()
        self.extractor = extractor or get_field_extractor()
        self.validator = validator or listing_validator
        self.batch_delay = settings.batch_delay if batch_delay is None else batch_delay
        self.max_concurrency = max_concurrency or settings.batch_max_concurrency
        self.sleep = sleep

        logger.info(
            "Listing pipeline initialized",
            batch_delay=self.batch_delay,
            max_concurrency=self.max_concurrency,
        )

    async def scrape_listing(
        self, url: str, options: Optional[ValidationOptions] = None
    ) -> Tuple[ExtractedListing, ValidationReport]:
        """
        Run one URL through resolve → fetch → extract → validate.

        Args:
            url: Listing URL on a supported site
            options: Validation options, defaults when None

        Returns:
            The raw extracted listing and its validation report

        Raises:
            UnsupportedUrlError: URL is not http(s) or not on a known site
            FetchError: The page could not be retrieved
            ParseError: The page could not be parsed
        """
        if not self.resolver.is_supported_url(url):
            log_pipeline_step(logger, "resolve", url, error="Unsupported URL")
            raise UnsupportedUrlError(
                f"URL is not a supported property listing: {url}", context={"url": url}
            )

        start_time = time.time()

        # Resolved once; every later step reuses this value.
        source = self.resolver.resolve(url)

        step_start = time.time()
        document = await self.fetcher.fetch(url)
        log_pipeline_step(
            logger,
            "fetch",
            url,
            duration=time.time() - step_start,
            details={"status_code": document.status_code, "bytes": document.byte_length},
        )

        step_start = time.time()
        listing = self.extractor.extract(document.html, source)
        if not listing.listing_id:
            listing.listing_id = self.resolver.extract_listing_id(url, source) or ""
        listing.listing_url = url
        log_pipeline_step(
            logger,
            "extract",
            url,
            duration=time.time() - step_start,
            details={"source": source.value, "listing_id": listing.listing_id},
        )

        report = self.validator.validate(listing, options)
        log_pipeline_step(
            logger,
            "validate",
            url,
            status="success" if report.is_valid else "warning",
            duration=time.time() - start_time,
            details={"errors": len(report.errors), "warnings": len(report.warnings)},
        )
        return listing, report

    async def scrape_many(
        self, urls: List[str], options: Optional[ValidationOptions] = None
    ) -> Tuple[List[BatchResult], BatchSummary]:
        """
        Run a batch of URLs. One item's failure never affects its siblings.

        Sequential by default with ``batch_delay`` seconds between items. With
        ``max_concurrency`` above one, items run concurrently under a per-host
        pacer. Results keep input order either way.
        """
        logger.info(
            f"Starting batch of {len(urls)} listing URLs",
            max_concurrency=self.max_concurrency,
        )
        start_time = time.time()

        if self.max_concurrency > 1:
            results = await self._run_concurrent(urls, options)
        else:
            results = []
            for index, url in enumerate(urls):
                if index > 0 and self.batch_delay > 0:
                    await self.sleep(self.batch_delay)
                results.append(await self._run_item(url, options))

        successful = sum(1 for result in results if result.success)
        summary = BatchSummary(
            total=len(results), successful=successful, failed=len(results) - successful
        )

        logger.info(
            f"Batch completed: {summary.successful} successful, "
            f"{summary.failed} failed in {time.time() - start_time:.2f}s"
        )
        return results, summary

    async def _run_concurrent(
        self, urls: List[str], options: Optional[ValidationOptions]
    ) -> List[BatchResult]:
        semaphore = asyncio.Semaphore(self.max_concurrency)
        pacer = HostPacer(self.batch_delay, sleep=self.sleep)

        async def run(url: str) -> BatchResult:
            async with pacer.slot(self._host(url)):
                async with semaphore:
                    return await self._run_item(url, options)

        return list(await asyncio.gather(*(run(url) for url in urls)))

    async def _run_item(
        self, url: str, options: Optional[ValidationOptions]
    ) -> BatchResult:
        try:
            _, report = await self.scrape_listing(url, options)
        except ListingPipelineException as e:
            logger.warning(f"Batch item failed for {url}: {e.message}")
            return BatchResult(url=url, success=False, error=e.message)
        except Exception as e:
            logger.exception(f"Unexpected error in batch item {url}")
            return BatchResult(url=url, success=False, error=str(e))

        if not report.is_valid:
            return BatchResult(
                url=url,
                success=False,
                error="; ".join(report.errors),
                warnings=report.warnings,
            )
        return BatchResult(
            url=url,
            success=True,
            listing=report.sanitized_data,
            warnings=report.warnings,
        )

    @staticmethod
    def _host(url: str) -> str:
        try:
            return (urlparse(url).hostname or "").lower()
        except ValueError:
            return ""


# Global pipeline instance
pipeline_manager = ListingPipeline()


def get_pipeline() -> ListingPipeline:
    return pipeline_manager
