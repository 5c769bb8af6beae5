"""Converters from parsed input rows to pipeline records.

This module holds the identifier normalizer, the numeric coercer and the
listing filter stage. Structural problems raise
:class:`~listings_enricher.errors.StructuralValidationError`; rows that are
well formed but unusable are dropped quietly and only counted.
"""

import logging
import math
import re
from typing import Any, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from listings_enricher.config import settings
from listings_enricher.errors import StructuralValidationError
from listings_enricher.records import ListingCandidate
from .models import ClimateRow, ListingRow

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_NON_DIGITS = re.compile(r"[^0-9]+")
# Plain decimal or exponent notation; rejects "1_000", "1,000", "inf", "nan".
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def normalize_apn(value: Any) -> str:
    """Reduce a parcel identifier to its ASCII digits.

    ``"12-34-567890"`` and ``"1234567890"`` both become ``"1234567890"``.
    ``None`` yields an empty string. Never raises.
    """
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


def to_number(value: Any) -> float:
    """Coerce a string or number into a finite float, or NaN.

    Handles:
    - Numbers: 1600, 52.1
    - Strings: "440000", " 2.5 ", "1e3", ".5"

    Empty strings, non-numeric text, "NaN" and infinities all become NaN.
    Never raises.
    """
    if value is None or isinstance(value, bool):
        return math.nan

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return math.nan
        return number if math.isfinite(number) else math.nan

    if isinstance(value, str):
        text = value.strip()
        if not _DECIMAL.fullmatch(text):
            return math.nan
        number = float(text)
        return number if math.isfinite(number) else math.nan

    return math.nan


def _optional_count(value: Any) -> Optional[float]:
    """Coerce beds/baths; blank, zero and unparsable values become None."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    number = to_number(value)
    if not math.isfinite(number) or number == 0:
        return None
    return number


def _validate(
    model: Type[ModelT], record: Mapping[str, Any], dataset: str, row_number: int
) -> ModelT:
    try:
        return model.model_validate(record)
    except ValidationError as e:
        fields = list(dict.fromkeys(str(err["loc"][0]) for err in e.errors() if err["loc"]))
        logger.debug(f"Validation errors for {dataset} row {row_number}: {e.errors()}")
        raise StructuralValidationError(
            dataset, row_number, fields, detail=e.errors()[0]["msg"]
        ) from e


def validate_listing_row(record: Mapping[str, Any], row_number: int) -> ListingRow:
    """Check a parsed listing row against :class:`ListingRow`.

    Raises:
        StructuralValidationError: If a required column is missing or a
            value has the wrong type. ``row_number`` is 1-based and only
            used for the error message.
    """
    return _validate(ListingRow, record, "listings", row_number)


def validate_climate_row(record: Mapping[str, Any], row_number: int) -> ClimateRow:
    """Check a parsed climate row against :class:`ClimateRow`."""
    return _validate(ClimateRow, record, "climate", row_number)


def raw_to_candidate(record: Mapping[str, Any], row_number: int = 1) -> ListingCandidate:
    """Convert one parsed listing row into a ListingCandidate.

    The candidate may still be incomplete (NaN price, empty APN); use
    :func:`filter_reason` to decide whether it survives.

    Raises:
        StructuralValidationError: If the row is structurally invalid

    Example:
        >>> candidate = raw_to_candidate({"apn": "12-34-567890", ...})
        >>> candidate.normalized_apn
        '1234567890'
    """
    row = validate_listing_row(record, row_number)
    return ListingCandidate(
        apn=row.apn,
        normalized_apn=normalize_apn(row.apn),
        address=row.address,
        city=row.city,
        state=row.state,
        zip=row.zip,
        price=to_number(row.price),
        sqft=to_number(row.sqft),
        beds=_optional_count(row.beds),
        baths=_optional_count(row.baths),
        status=row.status.lower(),
    )


def _status_set(allowed_statuses: Optional[Iterable[str]]) -> frozenset:
    if allowed_statuses is None:
        return settings.status_set
    return frozenset(s.lower() for s in allowed_statuses)


def filter_reason(
    candidate: ListingCandidate, allowed_statuses: Optional[Iterable[str]] = None
) -> Optional[str]:
    """Return why a candidate must be dropped, or None if it is kept."""
    statuses = _status_set(allowed_statuses)
    if not candidate.normalized_apn:
        return "empty apn"
    if not candidate.address:
        return "empty address"
    if not candidate.zip:
        return "empty zip"
    if not math.isfinite(candidate.price):
        return "price is not a number"
    if not math.isfinite(candidate.sqft):
        return "sqft is not a number"
    if candidate.status not in statuses:
        return f"status '{candidate.status}' not allowed"
    return None


def raw_to_candidates_batch(
    records: List[Mapping[str, Any]],
    allowed_statuses: Optional[Iterable[str]] = None,
) -> tuple[List[ListingCandidate], int]:
    """Validate, coerce and filter a batch of parsed listing rows.

    Every row is validated before any is filtered, so one malformed row
    fails the whole batch.

    Args:
        records: Parsed listing rows in input order
        allowed_statuses: Statuses to keep, any case (settings default if None)

    Returns:
        Tuple of (kept_candidates, filtered_out_count)

    Raises:
        StructuralValidationError: On the first structurally invalid row
    """
    statuses = _status_set(allowed_statuses)
    candidates = [raw_to_candidate(r, i) for i, r in enumerate(records, start=1)]

    kept = []
    for i, candidate in enumerate(candidates, start=1):
        reason = filter_reason(candidate, statuses)
        if reason is None:
            kept.append(candidate)
        else:
            logger.debug(f"Dropping listings row {i}: {reason} {candidate.to_dict()}")

    filtered = len(candidates) - len(kept)
    logger.info(
        f"Listing filter complete: {len(kept)} kept, {filtered} filtered out "
        f"of {len(candidates)} rows"
    )
    return kept, filtered
