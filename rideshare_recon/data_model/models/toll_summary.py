# rideshare_recon/data_model/models/toll_summary.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

import pandas as pd

from ...utilities.settings import TOLL_SUMMARY_MARKER
from .toll_charge import TollCharge


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


@dataclass(frozen=True)
class TollSummary:
    """
    Contents of the toll-summary artifact attached to one shift: every
    matched charge and their total.
    """

    shift_id: UUID
    shift_start: datetime
    charges: tuple[TollCharge, ...]

    @property
    def total(self) -> Decimal:
        return sum((c.amount for c in self.charges), Decimal("0"))

    @property
    def title(self) -> str:
        d = self.shift_start
        return f"{TOLL_SUMMARY_MARKER} - {d:%b} {d.day}, {d.year}"

    @property
    def description(self) -> str:
        return f"{TOLL_SUMMARY_MARKER} - {len(self.charges)} transactions"

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {
                "Date": f"{c.date:%m/%d/%Y %I:%M %p}",
                "Location": c.location,
                "Plate": c.plate,
                "Amount": _money(c.amount),
            }
            for c in sorted(self.charges, key=lambda c: c.date)
        ]
        return pd.DataFrame(rows, columns=["Date", "Location", "Plate", "Amount"])

    def to_text(self) -> str:
        """Plain-text document: title, one line per charge, total."""
        body = self.to_frame().to_string(index=False) if self.charges else "(no charges)"
        return "\n".join([self.title, "", body, "", f"Total: {_money(self.total)}"])
