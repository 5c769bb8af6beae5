"""Data validation module using Pydantic models.

This module checks the shape of parsed listing and climate rows and turns
listing rows into coerced, filtered candidates for the pipeline.

Main exports:
- ListingRow, ClimateRow: Structural models for parsed rows
- EnrichedListing: Output row model
- normalize_apn: Digit-only parcel identifier
- to_number: Finite float or NaN
- raw_to_candidate: Convert one parsed listing row
- raw_to_candidates_batch: Validate, coerce and filter a batch

Example usage:
    from listings_enricher.parsing import parse_table
    from listings_enricher.validation import raw_to_candidates_batch

    records = parse_table(listings_text, source="listings")
    candidates, filtered = raw_to_candidates_batch(records)
"""

from .models import ClimateRow, EnrichedListing, ListingRow
from .converters import (
    filter_reason,
    normalize_apn,
    raw_to_candidate,
    raw_to_candidates_batch,
    to_number,
    validate_climate_row,
    validate_listing_row,
)

__all__ = [
    "ClimateRow",
    "EnrichedListing",
    "ListingRow",
    "filter_reason",
    "normalize_apn",
    "raw_to_candidate",
    "raw_to_candidates_batch",
    "to_number",
    "validate_climate_row",
    "validate_listing_row",
]
