"""
Listing Extraction Pipeline

Extracts structured real-estate listing data from third-party property
websites and validates it into a typed, sanitized record.
"""

__version__ = "1.0.0"
__author__ = "Ateet Vatan Bahmani"
