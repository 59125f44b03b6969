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
Exceptions for the Listing Extraction Pipeline.

Only failures that prevent producing any listing at all are raised. Field-level
problems are never exceptions: they are collected as errors and warnings in a
ValidationReport.

Usage: from listing_pipeline.core.exceptions import FetchError, ParseError

All exceptions inherit from ListingPipelineException and can include a message
and optional context.
"""

from typing import Any, Optional


class ListingPipelineException(Exception):
    """
    Base exception for all listing pipeline errors.
    """

    retryable: bool = False

    def __init__(self, message: str, context: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.context = context


class UnsupportedUrlError(ListingPipelineException):
    """
    Raised when a URL does not belong to any known listing source.

    Not retryable without a different URL.
    """

    pass


class FetchError(ListingPipelineException):
    """
    Raised for network failures, non-2xx responses and undersized bodies.

    Retryable by the caller. The pipeline itself never retries.
    """

    retryable = True

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        context: Optional[Any] = None,
    ):
        super().__init__(message, context)
        self.status_code = status_code


class ParseError(ListingPipelineException):
    """Raised when HTML cannot be parsed into a document at all."""

    pass


class ConfigurationException(ListingPipelineException):
    """Exception raised for configuration-related errors."""

    pass
