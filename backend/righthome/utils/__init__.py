"""
Utility functions for the RightHome property co-pilot.
"""

from .helpers import (
    format_price,
    format_listing_price,
    format_field_value,
    format_requirement_map,
    clean_llm_response,
)

__all__ = [
    "format_price",
    "format_listing_price",
    "format_field_value",
    "format_requirement_map",
    "clean_llm_response",
]
