"""Pydantic models for structural validation and pipeline output.

``ListingRow`` and ``ClimateRow`` describe the shape a parsed input row must
have before it may enter the pipeline. They only check presence and type;
business rules (status allowlist, finite prices) belong to the filter stage
in :mod:`listings_enricher.validation.converters`.

``EnrichedListing`` is the immutable output row.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

# Numeric columns arrive as text from the parser but may be real numbers
# when records are built in code.
NumericInput = Union[str, int, float]


class ListingRow(BaseModel):
    """Structurally valid listing row.

    Values are kept verbatim: no whitespace stripping, no case folding.
    Unknown columns are ignored.

    Example:
        row = ListingRow(
            apn="12-34-567890",
            address="12 Oak St",
            zip="32801",
            price="440000",
            sqft="1600",
            status="for_sale",
        )
    """

    model_config = {"extra": "ignore"}

    # Required fields
    apn: str = Field(..., description="Assessor's parcel number as written in the source")
    address: str = Field(..., description="Street address")
    zip: str = Field(..., description="Postal code")
    price: NumericInput = Field(..., description="Asking or sold price")
    sqft: NumericInput = Field(..., description="Living area in square feet")
    status: str = Field(..., description="Listing status, e.g. for_sale")

    # Optional location fields
    city: str = Field("", description="City name")
    state: str = Field("", description="State code")

    # Optional property details
    beds: Optional[NumericInput] = Field(None, description="Number of bedrooms")
    baths: Optional[NumericInput] = Field(None, description="Number of bathrooms")


class ClimateRow(BaseModel):
    """Structurally valid climate row."""

    model_config = {"extra": "ignore"}

    apn: str = Field(..., description="Assessor's parcel number as written in the source")
    flood_zone: Optional[str] = Field(None, description="FEMA flood zone code")
    avg_rain_inches: Optional[NumericInput] = Field(
        None, description="Average annual rainfall in inches"
    )


class EnrichedListing(BaseModel):
    """One output row: a deduplicated listing joined with its climate data.

    Field order is the serialization order.
    """

    model_config = {"frozen": True}

    apn: str
    full_address: str
    price: float
    beds: Optional[float] = None
    baths: Optional[float] = None
    sqft: float
    price_per_sqft: Optional[int] = Field(
        None, description="round(price / sqft); None when the ratio is not finite"
    )
    status: str
    flood_zone: Optional[str] = None
    avg_rain_inches: Optional[float] = None

    @field_validator("status")
    @classmethod
    def lower_status(cls, v: str) -> str:
        """Statuses are always emitted lower-cased."""
        return v.lower()
