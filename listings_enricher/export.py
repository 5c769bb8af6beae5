"""JSON export of enriched listings."""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from listings_enricher.config import settings
from listings_enricher.validation.models import EnrichedListing

logger = logging.getLogger(__name__)


def _json_number(value: Optional[float]) -> Any:
    """Whole floats render as JSON integers (440000, not 440000.0)."""
    if value is None or not math.isfinite(value):
        return None
    if value.is_integer():
        return int(value)
    return value


def listing_to_dict(listing: EnrichedListing) -> Dict[str, Any]:
    """Output row in serialization field order."""
    return {
        "apn": listing.apn,
        "full_address": listing.full_address,
        "price": _json_number(listing.price),
        "beds": _json_number(listing.beds),
        "baths": _json_number(listing.baths),
        "sqft": _json_number(listing.sqft),
        "price_per_sqft": listing.price_per_sqft,
        "status": listing.status,
        "flood_zone": listing.flood_zone,
        "avg_rain_inches": _json_number(listing.avg_rain_inches),
    }


def listings_to_dicts(listings: Iterable[EnrichedListing]) -> List[Dict[str, Any]]:
    return [listing_to_dict(listing) for listing in listings]


def to_json(listings: Iterable[EnrichedListing], indent: Optional[int] = None) -> str:
    """Render listings as a JSON array (2-space indent by default)."""
    return json.dumps(
        listings_to_dicts(listings),
        indent=settings.output_indent if indent is None else indent,
        ensure_ascii=False,
        allow_nan=False,
    )


def write_json(listings: Iterable[EnrichedListing], path: Optional[Path] = None) -> Path:
    """Write listings to a UTF-8 JSON file and return its path."""
    path = Path(path) if path is not None else settings.output_file
    rows = list(listings)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(rows) + "\n", encoding="utf-8")
    logger.info(f"Wrote {len(rows)} enriched listings to {path}")
    return path
