# rideshare_recon/data_model/models/toll_charge.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..interfaces import RecursiveDictStr

UNKNOWN_LOCATION = "Unknown Location"
UNKNOWN_PLATE = "Unknown Plate"


@dataclass(frozen=True)
class TollCharge:
    """One toll-authority charge; `amount` is always positive."""

    date: datetime
    amount: Decimal
    location: str = UNKNOWN_LOCATION
    plate: str = UNKNOWN_PLATE
    row_index: Optional[int] = None

    def to_dict(self) -> dict[str, RecursiveDictStr]:
        return {
            "date": self.date.isoformat(),
            "location": self.location,
            "plate": self.plate,
            "amount": str(self.amount),
        }
