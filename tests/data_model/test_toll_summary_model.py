# tests/data_model/test_toll_summary_model.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from rideshare_recon.data_model.models import TollCharge, TollSummary


def _summary() -> TollSummary:
    return TollSummary(
        shift_id=uuid4(),
        shift_start=datetime(2025, 9, 16, 8, 0),
        charges=(
            TollCharge(datetime(2025, 9, 16, 18, 20, 33), Decimal("2.00"), "Bridge", "ABC1234"),
            TollCharge(datetime(2025, 9, 16, 9, 5), Decimal("3.00"), "I-95 Exit 4", "ABC1234"),
        ),
    )


def test_summary_title_description_and_total():
    """Positive: title, description and total describe the matched charges."""
    s = _summary()
    assert s.total == Decimal("5.00")
    assert s.title == "Toll Summary - Sep 16, 2025"
    assert s.description == "Toll Summary - 2 transactions"


def test_summary_frame_sorted_by_date():
    """Positive: one row per charge in chronological order."""
    frame = _summary().to_frame()
    assert list(frame.columns) == ["Date", "Location", "Plate", "Amount"]
    assert list(frame["Location"]) == ["I-95 Exit 4", "Bridge"]
    assert list(frame["Amount"]) == ["$3.00", "$2.00"]


def test_summary_text_lists_charges_and_total():
    """Positive: the document text holds every charge and the total."""
    text = _summary().to_text()
    assert text.startswith("Toll Summary - Sep 16, 2025")
    assert "I-95 Exit 4" in text and "Bridge" in text
    assert text.rstrip().endswith("Total: $5.00")


def test_summary_without_charges():
    """Negative: an empty summary still renders, with a zero total."""
    s = TollSummary(shift_id=uuid4(), shift_start=datetime(2025, 9, 16), charges=())
    assert s.total == Decimal("0")
    assert "(no charges)" in s.to_text()
