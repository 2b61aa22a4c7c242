# rideshare_recon/data_model/interfaces/enum_transaction_category.py
from __future__ import annotations

from enum import Enum


class TransactionCategory(Enum):
    """
    Bucket a statement row contributes to when totals are computed.
    """

    TIP = "Tip"
    PROMOTION = "Promotion"
    NET_FARE = "NetFare"
    IGNORE = "Ignore"

    @classmethod
    def from_event_type(cls, event_type: str) -> "TransactionCategory":
        """
        Classify by the (case-insensitive) event type text.

        Bank transfers are checked first since "transferred" can appear
        anywhere in the text.
        """
        text = (event_type or "").strip().lower()
        if "transferred" in text:
            return cls.IGNORE
        if text.startswith("tip"):
            return cls.TIP
        if text.startswith("quest") or text.startswith("incentive"):
            return cls.PROMOTION
        return cls.NET_FARE
