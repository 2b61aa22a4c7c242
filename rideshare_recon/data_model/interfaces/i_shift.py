# rideshare_recon/data_model/interfaces/i_shift.py
from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional
from uuid import UUID

from typing_extensions import Protocol, runtime_checkable


@runtime_checkable
class IShift(Protocol):
    """
    What the reconciliation core needs from a shift: its time window, the
    toll accumulator and its attachments.
    """

    id: UUID
    start_date: datetime
    end_date: Optional[datetime]
    tolls: Optional[Decimal]
    image_attachments: list

    def effective_end(self, open_window: Optional[timedelta] = None) -> datetime: ...
    def contains(self, moment: datetime, open_window: Optional[timedelta] = None) -> bool: ...
