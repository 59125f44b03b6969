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
This module handles the text and URL helpers shared by extraction and validation.
"""

import math
import re
from typing import Iterable, List, Optional
from urllib.parse import urlparse


_WHITESPACE_RE = re.compile(r"\s+")
_DIGIT_RUN_RE = re.compile(r"(\d+)")

# Thousands grouped with spaces/commas first ("1 200 000", "1,200,000.50"),
# then a plain number with an optional decimal part ("1200000", "85.5").
_NUMBER_RE = re.compile(
    r"(\d{1,3}(?:[ \u00a0\u202f,]\d{3})+(?:\.\d+)?|\d+(?:[.,]\d+)?)"
)


class WebScraperUtils:
    """
    This class handles the text and URL helpers shared by extraction and validation.
    """

    @staticmethod
    def collapse_whitespace(text: Optional[str]) -> str:
        """Trim and squash every whitespace run to a single space."""
        if not text:
            return ""
        return _WHITESPACE_RE.sub(" ", text).strip()

    @staticmethod
    def first_digit_run(text: Optional[str]) -> str:
        """Return the first run of digits in ``text`` ("3 Bedrooms" -> "3")."""
        if not text:
            return ""
        match = _DIGIT_RUN_RE.search(text)
        return match.group(1) if match else ""

    @staticmethod
    def first_number_text(text: Optional[str]) -> str:
        """Return the first number in ``text`` with its separators kept ("1 200 m²" -> "1 200")."""
        if not text:
            return ""
        match = _NUMBER_RE.search(text)
        return match.group(1) if match else ""

    @staticmethod
    def parse_number(text: Optional[str]) -> Optional[float]:
        """
        Parse the first number in ``text`` into a float.

        Space and comma thousands separators are removed. A lone comma followed
        by one or two digits is read as a decimal comma ("85,5" -> 85.5).

        Returns:
            The parsed value, or None if ``text`` holds no finite number.
        """
        raw = WebScraperUtils.first_number_text(text)
        if not raw:
            return None

        compact = re.sub(r"[ \u00a0\u202f]", "", raw)
        if re.fullmatch(r"\d+,\d{1,2}", compact):
            compact = compact.replace(",", ".")
        else:
            compact = compact.replace(",", "")

        try:
            value = float(compact)
        except ValueError:
            return None
        return value if math.isfinite(value) else None

    @staticmethod
    def is_absolute_http_url(url: Optional[str]) -> bool:
        """True for well-formed absolute http(s) URLs with a host."""
        if not url or not isinstance(url, str) or any(c.isspace() for c in url):
            return False
        try:
            parsed = urlparse(url)
        except ValueError:
            return False
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    @staticmethod
    def contains_placeholder(text: Optional[str], tokens: Iterable[str]) -> bool:
        """Whole-word, case-insensitive check for placeholder tokens like "test"."""
        if not text:
            return False
        lowered = text.lower()
        return any(
            re.search(r"\b" + re.escape(token) + r"\b", lowered) for token in tokens
        )

    @staticmethod
    def unique(items: Iterable[str]) -> List[str]:
        """Drop repeats (case-sensitive), keeping first-occurrence order."""
        seen = set()
        result = []
        for item in items:
            if item in seen:
                continue
            seen.add(item)
            result.append(item)
        return result
