# rideshare_recon/data_model/interfaces/enum_attachment_type.py
from __future__ import annotations

from enum import Enum


class AttachmentType(Enum):
    """
    Kind of image/document attached to a shift.

    Only system-generated kinds are ever replaced by import code; everything
    else belongs to the user.
    """

    RECEIPT = "Receipt"
    SCREENSHOT = "App Screenshot"
    GAS_PUMP = "Gas Pump"
    DASHBOARD = "Dashboard"
    DAMAGE = "Vehicle Damage"
    CLEANING = "Cleaning Required"
    MAINTENANCE = "Maintenance"
    IMPORTED_TOLL = "Imported Toll Summary"
    IMPORTED_UBER_TXNS = "Imported Uber Transactions"
    OTHER = "Other"

    @property
    def is_system_generated(self) -> bool:
        return self in (AttachmentType.IMPORTED_TOLL, AttachmentType.IMPORTED_UBER_TXNS)

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_value(cls, value: str) -> "AttachmentType":
        """Look up by display value or member name; unknown text maps to OTHER."""
        for member in cls:
            if value in (member.value, member.name):
                return member
        return cls.OTHER
