"""Exceptions raised by the enrichment pipeline.

Only fatal conditions are modelled as exceptions. Rows that are well formed
but fail a business rule (bad status, unparsable price, empty APN) are
dropped by the filter stage and never surface here.
"""

from typing import Optional, Sequence


class EnrichmentError(Exception):
    """Base exception for failures that abort a whole enrichment run."""

    error_code = "ENRICHMENT_ERROR"


class MalformedInputError(EnrichmentError):
    """Raised when raw listings or climate text cannot be tokenized."""

    error_code = "MALFORMED_INPUT"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: could not parse input ({reason})")


class StructuralValidationError(EnrichmentError):
    """Raised when a parsed row lacks a required field or has the wrong shape."""

    error_code = "STRUCTURAL_VALIDATION"

    def __init__(
        self,
        dataset: str,
        row_number: int,
        fields: Sequence[str],
        detail: Optional[str] = None,
    ):
        self.dataset = dataset
        self.row_number = row_number
        self.fields = list(fields)
        self.detail = detail

        message = (
            f"{dataset} row {row_number}: missing or invalid field(s): "
            f"{', '.join(self.fields) or '<row>'}"
        )
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
