"""Intermediate record types passed between pipeline stages."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

# One parsed input row: lower-cased, trimmed column name -> raw string value.
RawRecord = Dict[str, str]


@dataclass(frozen=True)
class ListingCandidate:
    """Listing row after structural validation and numeric coercion.

    ``price`` and ``sqft`` may still be NaN here; the filter stage drops
    such candidates. ``apn`` keeps the source spelling for output while
    ``normalized_apn`` is the join key.
    """
    # Identity
    apn: str
    normalized_apn: str

    # Location
    address: str
    city: str
    state: str
    zip: str

    # Numbers
    price: float
    sqft: float
    beds: Optional[float]
    baths: Optional[float]

    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "apn": self.apn,
            "normalized_apn": self.normalized_apn,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip": self.zip,
            "price": self.price,
            "sqft": self.sqft,
            "beds": self.beds,
            "baths": self.baths,
            "status": self.status,
        }


@dataclass(frozen=True)
class ClimateAttributes:
    """Climate values attached to one parcel. Never holds NaN."""
    flood_zone: Optional[str] = None
    avg_rain_inches: Optional[float] = None


NO_CLIMATE = ClimateAttributes()
