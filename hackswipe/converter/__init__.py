"""
Converter module.

Reshapes scraped Devpost data into the corpus the app consumes.
"""

from hackswipe.converter.devpost import (
    NO_SUMMARY_PLACEHOLDER,
    UNTITLED_PLACEHOLDER,
    ConversionResult,
    build_date,
    build_prize,
    build_summary,
    clean_ai_summary,
    convert_record,
    convert_records,
)

__all__ = [
    "NO_SUMMARY_PLACEHOLDER",
    "UNTITLED_PLACEHOLDER",
    "ConversionResult",
    "build_date",
    "build_prize",
    "build_summary",
    "clean_ai_summary",
    "convert_record",
    "convert_records",
]
