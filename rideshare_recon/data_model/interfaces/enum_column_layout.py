# rideshare_recon/data_model/interfaces/enum_column_layout.py
from __future__ import annotations

from enum import Enum


class ColumnLayout(Enum):
    """
    Shape of a statement's transaction table.

    FIVE_COLUMN:  Processed | Event | Amount | Payout | Balance
    SIX_COLUMN:   Processed | Event | Amount | Refunds & Expenses | Payout | Balance
    """

    FIVE_COLUMN = 5
    SIX_COLUMN = 6

    @property
    def has_toll_column(self) -> bool:
        return self is ColumnLayout.SIX_COLUMN

    @property
    def amount_slots(self) -> tuple[str, ...]:
        """Names of the figures printed on a transaction's first row, left to right."""
        if self.has_toll_column:
            return ("amount", "toll", "payout", "balance")
        return ("amount", "payout", "balance")
