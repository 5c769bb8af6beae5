"""Shared fixtures for the test suite."""

import pytest

from listings_enricher.demo import DEMO_CLIMATE_CSV, DEMO_LISTINGS_TSV
from listings_enricher.records import ListingCandidate

LISTING_COLUMNS = ["apn", "address", "city", "state", "zip", "price", "beds", "baths", "sqft", "status"]
CLIMATE_COLUMNS = ["apn", "flood_zone", "avg_rain_inches"]


def make_listing_record(
    apn="12-34-567890",
    address="12 Oak St",
    city="Orlando",
    state="FL",
    zip="32801",
    price="440000",
    beds="3",
    baths="2",
    sqft="1600",
    status="for_sale",
    **kwargs,
) -> dict:
    """Factory for parsed listing rows (all values are strings, like the parser's)."""
    record = dict(
        apn=apn,
        address=address,
        city=city,
        state=state,
        zip=zip,
        price=price,
        beds=beds,
        baths=baths,
        sqft=sqft,
        status=status,
    )
    record.update(kwargs)
    return record


def make_climate_record(apn="1234567890", flood_zone="AE", avg_rain_inches="52.1", **kwargs) -> dict:
    """Factory for parsed climate rows."""
    record = dict(apn=apn, flood_zone=flood_zone, avg_rain_inches=avg_rain_inches)
    record.update(kwargs)
    return record


def make_candidate(
    apn="12-34-567890",
    price=440000.0,
    sqft=1600.0,
    status="for_sale",
    **kwargs,
) -> ListingCandidate:
    """Factory for ListingCandidate instances that pass the filter."""
    defaults = dict(
        apn=apn,
        normalized_apn="".join(ch for ch in apn if ch.isdigit()),
        address="12 Oak St",
        city="Orlando",
        state="FL",
        zip="32801",
        price=price,
        sqft=sqft,
        beds=3.0,
        baths=2.0,
        status=status,
    )
    defaults.update(kwargs)
    return ListingCandidate(**defaults)


def to_table(records, columns, delimiter=",") -> str:
    """Render records back into delimited text for parser-level tests."""
    lines = [delimiter.join(columns)]
    for record in records:
        lines.append(delimiter.join(str(record.get(c, "")) for c in columns))
    return "\n".join(lines)


@pytest.fixture
def demo_listings_text():
    return DEMO_LISTINGS_TSV


@pytest.fixture
def demo_climate_text():
    return DEMO_CLIMATE_CSV


@pytest.fixture
def scenario_records():
    """Duplicate APN at two prices plus one listing without climate data."""
    listings = [
        make_listing_record(price="450000"),
        make_listing_record(price="440000"),
        make_listing_record(
            apn="40-50-600000",
            address="3 Bay Rd",
            city="Tampa",
            zip="33602",
            price="350000",
            sqft="1400",
            status="Pending",
        ),
    ]
    climate = [make_climate_record()]
    return listings, climate
