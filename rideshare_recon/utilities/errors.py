# rideshare_recon/utilities/errors.py
from __future__ import annotations

from typing import Optional


class ReconciliationError(ValueError):
    """Base class for every error raised by the import/reconciliation core."""


class MalformedAmount(ReconciliationError):
    """A currency cell could not be turned into a Decimal."""


class MalformedDate(ReconciliationError):
    """A date/time cell could not be parsed with any known format."""


class UnrecognizedLayout(ReconciliationError):
    """
    The input has no recognizable header (statement table header, statement
    period, or required CSV columns). Raised before any row is parsed.
    """


class RowParseFailure(ReconciliationError):
    """
    A single statement/CSV row could not be parsed.

    These are collected as diagnostics by the parsers; they are never allowed
    to abort the surrounding import.
    """

    def __init__(self, row_text: str, reason: str, row_index: Optional[int] = None):
        self.row_text = row_text
        self.reason = reason
        self.row_index = row_index
        where = f" (row {row_index})" if row_index is not None else ""
        super().__init__(f"{reason}{where}: {row_text!r}")
