"""Enrichment pipeline for listings and climate data.

This module joins a listings table with a climate table on the normalized
parcel identifier (APN):
1. Validate: Check every parsed row against the structural models
2. Filter: Coerce numbers and drop incomplete or off-market listings
3. Deduplicate: Keep the cheapest listing per normalized APN
4. Enrich: Left-join climate attributes and derive full_address, price_per_sqft
5. Sort: Order by ascending price (stable)

The stages are pure functions over in-memory lists. ``enrich_listings`` is
the record-level entry point and raises on structural errors;
``EnrichmentPipeline`` wraps it for raw text and reports a structured result.

Example usage:
    from listings_enricher.etl import EnrichmentPipeline

    pipeline = EnrichmentPipeline()
    result = pipeline.run(listings_text, climate_text)
    if result.success:
        print(f"{len(result.listings)} listings enriched")
    else:
        print(result.error_message)
"""

import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from listings_enricher.errors import EnrichmentError
from listings_enricher.parsing import parse_table
from listings_enricher.records import NO_CLIMATE, ClimateAttributes, ListingCandidate
from listings_enricher.validation import (
    EnrichedListing,
    normalize_apn,
    raw_to_candidates_batch,
    to_number,
    validate_climate_row,
)

logger = logging.getLogger(__name__)


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3).

    Uses the exact binary value of the float, so 0.49999999999999994 rounds to 0.
    """
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def price_per_sqft(price: float, sqft: float) -> Optional[int]:
    """Rounded price per square foot, or None when the ratio is not finite."""
    if sqft == 0:
        return None
    ratio = price / sqft
    if not math.isfinite(ratio):
        return None
    return round_half_away_from_zero(ratio)


def full_address(candidate: ListingCandidate) -> str:
    # Empty city/state are kept as-is, e.g. "1 Main St, ,  32801".
    return f"{candidate.address}, {candidate.city}, {candidate.state} {candidate.zip}"


def deduplicate_listings(candidates: Iterable[ListingCandidate]) -> List[ListingCandidate]:
    """Keep one candidate per normalized APN: the strictly cheapest.

    On equal prices the candidate seen first wins. The result is ordered by
    the first appearance of each APN.
    """
    best: Dict[str, ListingCandidate] = {}
    for candidate in candidates:
        current = best.get(candidate.normalized_apn)
        if current is None or candidate.price < current.price:
            best[candidate.normalized_apn] = candidate
    return list(best.values())


def build_climate_index(
    records: Iterable[Mapping[str, object]],
) -> Dict[str, ClimateAttributes]:
    """Build normalized APN -> climate attributes.

    Rows without digits in their APN are skipped. When an APN repeats, the
    later row replaces the earlier one.

    Raises:
        StructuralValidationError: If a climate row has no ``apn`` column
    """
    index: Dict[str, ClimateAttributes] = {}
    for row_number, record in enumerate(records, start=1):
        row = validate_climate_row(record, row_number)
        key = normalize_apn(row.apn)
        if not key:
            logger.debug(f"Skipping climate row {row_number}: no digits in apn {row.apn!r}")
            continue

        rain = None
        if row.avg_rain_inches is not None and row.avg_rain_inches != "":
            rain = to_number(row.avg_rain_inches)
            if math.isnan(rain):
                rain = None

        index[key] = ClimateAttributes(
            flood_zone=row.flood_zone or None,
            avg_rain_inches=rain,
        )
    return index


def enrich_candidates(
    candidates: Iterable[ListingCandidate],
    climate_index: Mapping[str, ClimateAttributes],
) -> List[EnrichedListing]:
    """Left-join candidates with the climate index and derive output fields."""
    enriched = []
    for c in candidates:
        climate = climate_index.get(c.normalized_apn, NO_CLIMATE)
        enriched.append(
            EnrichedListing(
                apn=c.apn,
                full_address=full_address(c),
                price=c.price,
                beds=c.beds,
                baths=c.baths,
                sqft=c.sqft,
                price_per_sqft=price_per_sqft(c.price, c.sqft),
                status=c.status,
                flood_zone=climate.flood_zone,
                avg_rain_inches=climate.avg_rain_inches,
            )
        )
    return enriched


def sort_by_price(listings: Iterable[EnrichedListing]) -> List[EnrichedListing]:
    """Ascending price; equal prices keep their incoming order."""
    return sorted(listings, key=lambda listing: listing.price)


@dataclass
class StageCounts:
    """Row counts observed while running the stages once."""

    listings_in: int = 0
    listings_filtered: int = 0
    listings_deduplicated: int = 0
    climate_in: int = 0
    climate_matched: int = 0


def _run_stages(
    listing_records: List[Mapping[str, object]],
    climate_records: List[Mapping[str, object]],
    allowed_statuses: Optional[Iterable[str]],
    counts: StageCounts,
) -> List[EnrichedListing]:
    counts.listings_in = len(listing_records)
    counts.climate_in = len(climate_records)

    candidates, counts.listings_filtered = raw_to_candidates_batch(
        listing_records, allowed_statuses
    )
    climate_index = build_climate_index(climate_records)

    unique = deduplicate_listings(candidates)
    counts.listings_deduplicated = len(candidates) - len(unique)
    counts.climate_matched = sum(1 for c in unique if c.normalized_apn in climate_index)

    return sort_by_price(enrich_candidates(unique, climate_index))


def enrich_listings(
    listing_records: List[Mapping[str, object]],
    climate_records: List[Mapping[str, object]],
    allowed_statuses: Optional[Iterable[str]] = None,
) -> List[EnrichedListing]:
    """Run every stage over parsed records and return the sorted output.

    Args:
        listing_records: Parsed listing rows in input order
        climate_records: Parsed climate rows in input order
        allowed_statuses: Statuses to keep (settings default if None)

    Returns:
        Enriched listings sorted by ascending price

    Raises:
        StructuralValidationError: If any row is structurally invalid; no
            partial result is produced
    """
    return _run_stages(listing_records, climate_records, allowed_statuses, StageCounts())


@dataclass
class EnrichmentResult:
    """Result of an enrichment pipeline run."""

    run_id: str
    started_at: datetime
    finished_at: datetime
    listings_in: int
    listings_filtered: int
    listings_deduplicated: int
    climate_in: int
    climate_matched: int
    success: bool
    listings: List[EnrichedListing] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def duration_seconds(self) -> float:
        """Calculate run duration in seconds."""
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> dict:
        """Summary of the run, without the listings themselves."""
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "duration_seconds": self.duration_seconds,
            "listings_in": self.listings_in,
            "listings_filtered": self.listings_filtered,
            "listings_deduplicated": self.listings_deduplicated,
            "listings_out": len(self.listings),
            "climate_in": self.climate_in,
            "climate_matched": self.climate_matched,
            "success": self.success,
            "error_message": self.error_message,
        }


class EnrichmentPipeline:
    """Orchestrates parse -> validate -> filter -> dedup -> enrich -> sort.

    A run either succeeds with the full output or fails with a single error
    message and no listings.
    """

    def __init__(self, allowed_statuses: Optional[Iterable[str]] = None):
        """Initialize pipeline.

        Args:
            allowed_statuses: Listing statuses to keep (settings default if None)
        """
        self.allowed_statuses = (
            frozenset(s.lower() for s in allowed_statuses)
            if allowed_statuses is not None
            else None
        )

    def run(self, listings_text: str, climate_text: str) -> EnrichmentResult:
        """Run the pipeline over raw listings and climate text.

        Args:
            listings_text: CSV or TSV listings table with a header row
            climate_text: CSV or TSV climate table with a header row

        Returns:
            EnrichmentResult with the sorted listings or the error message

        Example:
            >>> result = EnrichmentPipeline().run(DEMO_LISTINGS_TSV, DEMO_CLIMATE_CSV)
            >>> [r.price for r in result.listings]
            [440000.0, 520000.0, 800000.0]
        """
        started_at = datetime.now(timezone.utc)
        run_id = uuid.uuid4().hex[:12]
        counts = StageCounts()

        logger.info(f"Starting enrichment run {run_id}")

        try:
            listing_records = parse_table(listings_text, source="listings")
            climate_records = parse_table(climate_text, source="climate")
            listings = _run_stages(
                listing_records, climate_records, self.allowed_statuses, counts
            )

        except EnrichmentError as e:
            logger.error(f"Enrichment run {run_id} failed: {e}")
            return self._result(run_id, started_at, counts, [], success=False, error=str(e))

        logger.info(
            f"Enrichment run {run_id} completed: {counts.listings_in} listings in, "
            f"{counts.listings_filtered} filtered, "
            f"{counts.listings_deduplicated} duplicates collapsed, "
            f"{len(listings)} out, {counts.climate_matched} with climate data"
        )
        return self._result(run_id, started_at, counts, listings, success=True)

    def _result(
        self,
        run_id: str,
        started_at: datetime,
        counts: StageCounts,
        listings: List[EnrichedListing],
        success: bool,
        error: Optional[str] = None,
    ) -> EnrichmentResult:
        return EnrichmentResult(
            run_id=run_id,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            listings_in=counts.listings_in,
            listings_filtered=counts.listings_filtered,
            listings_deduplicated=counts.listings_deduplicated,
            climate_in=counts.climate_in,
            climate_matched=counts.climate_matched,
            success=success,
            listings=listings,
            error_message=error,
        )
