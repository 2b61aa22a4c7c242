# rideshare_recon/data_model/models/shift.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from ...utilities.settings import OPEN_SHIFT_WINDOW
from ..interfaces import AttachmentType, IShift, RecursiveDictStr


@dataclass
class ImageAttachment:
    """Reference to an image/document stored next to a shift."""

    filename: str
    type: AttachmentType = AttachmentType.OTHER
    description: Optional[str] = None
    created_date: datetime = field(default_factory=datetime.now)
    id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict[str, RecursiveDictStr]:
        return {
            "id": str(self.id),
            "filename": self.filename,
            "type": self.type.value,
            "description": self.description,
            "created_date": self.created_date.isoformat(),
        }


@dataclass
class Shift:
    """
    A driving shift as far as reconciliation is concerned.

    The surrounding application owns shifts; import code only reads the time
    window and writes `tolls` and the system-generated attachments.
    """

    start_date: datetime
    end_date: Optional[datetime] = None
    start_mileage: Optional[Decimal] = None
    end_mileage: Optional[Decimal] = None
    tolls: Optional[Decimal] = None
    image_attachments: list[ImageAttachment] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)

    def effective_end(self, open_window: Optional[timedelta] = None) -> datetime:
        """`end_date`, or `start_date` plus the open-shift window."""
        if self.end_date is not None:
            return self.end_date
        return self.start_date + (OPEN_SHIFT_WINDOW if open_window is None else open_window)

    def contains(self, moment: datetime, open_window: Optional[timedelta] = None) -> bool:
        """Inclusive on both ends."""
        return self.start_date <= moment <= self.effective_end(open_window)

    def window_length(self, open_window: Optional[timedelta] = None) -> timedelta:
        return self.effective_end(open_window) - self.start_date

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    @property
    def mileage(self) -> Optional[Decimal]:
        if self.start_mileage is None or self.end_mileage is None:
            return None
        return self.end_mileage - self.start_mileage

    def attachments_of_type(self, kind: AttachmentType) -> list[ImageAttachment]:
        return [a for a in self.image_attachments if a.type is kind]


if TYPE_CHECKING:
    _s: IShift = Shift(datetime.now())
