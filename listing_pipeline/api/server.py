"""
FastAPI server for the Listing Extraction Pipeline.

Thin HTTP adapter over the pipeline: URL pre-check, single and batch scrape,
health. Every listing response uses the same envelope:
``{success, data, error, warnings}``.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from listing_pipeline import __version__
from listing_pipeline.config import get_api_logger, get_settings, setup_logging
from listing_pipeline.core.exceptions import (
    FetchError,
    ListingPipelineException,
    ParseError,
    UnsupportedUrlError,
)
from listing_pipeline.models import ValidationOptions
from listing_pipeline.pipeline import ListingPipeline, get_pipeline
from listing_pipeline.scraping import get_source_resolver
from listing_pipeline.services import to_template_data


logger = get_api_logger(__name__)
settings = get_settings()


# Pydantic models for API requests/responses


class ApiResponse(BaseModel):
    """Envelope shared by every listing endpoint."""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class ValidationSwitches(BaseModel):
    """Validation switches accepted by the scrape endpoints."""

    strict_mode: bool = False
    allow_partial_data: bool = True
    auto_correct: bool = True

    def options(self) -> ValidationOptions:
        return ValidationOptions(
            strict_mode=self.strict_mode,
            allow_partial_data=self.allow_partial_data,
            auto_correct=self.auto_correct,
        )


class ScrapeRequest(ValidationSwitches):
    url: str


class BatchScrapeRequest(ValidationSwitches):
    urls: List[str] = Field(default_factory=list)


class CreditLedger(Protocol):
    """Credit balance lookups and deductions for an account."""

    async def has_credits(self, account_id: str, amount: int) -> bool: ...

    async def deduct(self, account_id: str, amount: int) -> None: ...


class UnmeteredCreditLedger:
    """Ledger used when no billing backend is wired in: everything is free."""

    async def has_credits(self, account_id: str, amount: int) -> bool:
        return True

    async def deduct(self, account_id: str, amount: int) -> None:
        logger.debug("Credit deduction skipped", account_id=account_id, amount=amount)


ERROR_STATUS_CODES = {
    UnsupportedUrlError: 400,
    FetchError: 503,
    ParseError: 422,
}


def status_code_for(exc: Exception) -> int:
    """HTTP status for a pipeline exception."""
    for exc_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return 500


def envelope(
    status_code: int,
    success: bool,
    data: Any = None,
    error: Optional[str] = None,
    warnings: Optional[List[str]] = None,
) -> JSONResponse:
    body = ApiResponse(success=success, data=data, error=error, warnings=warnings or [])
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


# Application lifespan management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    setup_logging()
    logger.info("Starting Listing Extraction Pipeline server", version=__version__)
    yield
    logger.info("Listing Extraction Pipeline server shutdown completed")


async def verify_api_key(request: Request):
    """
    Verify API key from request headers.

    Raises:
        HTTPException: If API key is missing or invalid
    """
    settings = get_settings()

    # Skip verification if not required
    if not settings.require_api_key:
        return True

    api_key = request.headers.get("X-API-Key") or request.headers.get("Authorization")

    if not api_key:
        raise HTTPException(
            status_code=401,
            detail="API key required. Please provide X-API-Key or Authorization header",
        )

    if api_key.startswith("Bearer "):
        api_key = api_key[7:]

    if api_key != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")

    return True


# Create FastAPI application
app = FastAPI(
    title="Listing Extraction Pipeline",
    description="Extracts and validates South African property listings",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    dependencies=[Depends(verify_api_key)],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


_credit_ledger = UnmeteredCreditLedger()


async def get_listing_pipeline() -> ListingPipeline:
    return get_pipeline()


async def get_credit_ledger() -> CreditLedger:
    return _credit_ledger


async def get_account_id(request: Request) -> str:
    return request.headers.get("X-Account-Id") or "anonymous"


# API Endpoints


@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Listing Extraction Pipeline API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "status": "operational",
    }


@app.get("/health")
async def health_check():
    """Liveness probe."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/listings/validate-url")
async def validate_url(url: str):
    """Check whether a URL is a supported listing URL without fetching it."""
    resolver = get_source_resolver()
    source = resolver.resolve(url)
    is_valid = resolver.is_supported_url(url)
    listing_id = resolver.extract_listing_id(url, source) if is_valid else None
    return envelope(
        200,
        success=True,
        data={
            "is_valid": is_valid,
            "source": source.value,
            "listing_id": listing_id,
            "url": url,
        },
    )


@app.post("/listings/scrape")
async def scrape_listing(
    request: ScrapeRequest,
    pipeline: ListingPipeline = Depends(get_listing_pipeline),
    ledger: CreditLedger = Depends(get_credit_ledger),
    account_id: str = Depends(get_account_id),
):
    """
    Scrape one listing URL, validate it and return the sanitized listing.

    Costs one credit, charged only when the listing validates.
    """
    if not await ledger.has_credits(account_id, 1):
        return envelope(402, success=False, error="Insufficient credits")

    try:
        listing, report = await pipeline.scrape_listing(request.url, request.options())
    except ListingPipelineException as e:
        logger.warning(f"Scrape failed for {request.url}: {e.message}")
        return envelope(status_code_for(e), success=False, error=e.message)
    except Exception as e:
        logger.error(f"Unexpected error scraping {request.url}: {e}", exc_info=True)
        return envelope(500, success=False, error="Failed to scrape property listing")

    if not report.is_valid:
        return envelope(
            422,
            success=False,
            data={"errors": report.errors, "listing": listing.model_dump()},
            error="Property data validation failed",
            warnings=report.warnings,
        )

    await ledger.deduct(account_id, 1)
    sanitized = report.sanitized_data
    return envelope(
        200,
        success=True,
        data={
            "listing": sanitized.model_dump(),
            "template_data": to_template_data(sanitized),
            "credits_used": 1,
        },
        warnings=report.warnings,
    )


@app.post("/listings/scrape/batch")
async def scrape_batch(
    request: BatchScrapeRequest,
    pipeline: ListingPipeline = Depends(get_listing_pipeline),
    ledger: CreditLedger = Depends(get_credit_ledger),
    account_id: str = Depends(get_account_id),
):
    """
    Scrape several listing URLs in one call.

    Credits for every URL must be available up front; only successful items
    are charged.
    """
    urls = request.urls
    if not urls:
        return envelope(400, success=False, error="At least one URL is required")
    if len(urls) > settings.max_batch_size:
        return envelope(
            400,
            success=False,
            error=f"Maximum {settings.max_batch_size} URLs allowed per batch",
        )

    if not await ledger.has_credits(account_id, len(urls)):
        return envelope(402, success=False, error="Insufficient credits")

    try:
        results, summary = await pipeline.scrape_many(urls, request.options())
    except Exception as e:
        logger.error(f"Unexpected error in batch scrape: {e}", exc_info=True)
        return envelope(500, success=False, error="Batch scrape failed")

    if summary.successful:
        await ledger.deduct(account_id, summary.successful)

    return envelope(
        200,
        success=True,
        data={
            "results": [result.model_dump() for result in results],
            "summary": summary.model_dump(),
            "credits_used": summary.successful,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return envelope(500, success=False, error="Internal server error")
