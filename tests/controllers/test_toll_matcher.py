# tests/controllers/test_toll_matcher.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

# System under test
import rideshare_recon.controllers.toll_matcher as tm
from rideshare_recon.controllers.toll_summary_renderer import (
    DirectoryTollSummaryRenderer,
    InMemoryTollSummaryRenderer,
)
from rideshare_recon.data_model.interfaces import AttachmentType, ITollSummaryRenderer
from rideshare_recon.data_model.models import ImageAttachment, Shift, TollCharge


def _charge(h: int, m: int, amount: str) -> TollCharge:
    return TollCharge(date=datetime(2025, 9, 16, h, m), amount=Decimal(amount), location="I-95")


@pytest.fixture
def shift():
    return Shift(start_date=datetime(2025, 9, 16, 17, 0), end_date=datetime(2025, 9, 16, 23, 0))


def test_tolls_summed_and_single_summary_attached(shift):
    """Positive: 3.00 + 2.00 inside the shift sets tolls to 5.00 with one summary."""
    # Arrange
    renderer = InMemoryTollSummaryRenderer()
    matcher = tm.TollMatcher(renderer)
    # Act
    report = matcher.match([_charge(18, 20, "3.00"), _charge(19, 5, "2.00")], [shift])
    # Assert
    assert shift.tolls == Decimal("5.00")
    (att,) = shift.attachments_of_type(AttachmentType.IMPORTED_TOLL)
    assert att.description == "Toll Summary - 2 transactions"
    assert report.totals == {shift.id: Decimal("5.00")}
    assert report.images_generated == 1
    assert report.updated_shifts == [shift]
    assert "Total: $5.00" in renderer.documents[att.filename]


def test_reimport_replaces_summary_and_overwrites_total(shift):
    """Positive: importing the same charges twice leaves one summary and the same total."""
    # Arrange
    matcher = tm.TollMatcher()
    charges = [_charge(18, 20, "3.00"), _charge(19, 5, "2.00")]
    first = matcher.match(charges, [shift])
    old = shift.attachments_of_type(AttachmentType.IMPORTED_TOLL)[0]
    # Act
    second = matcher.match(charges, [shift])
    # Assert
    assert first.removed_attachments == {}
    assert second.removed_attachments == {shift.id: [old]}
    assert shift.tolls == Decimal("5.00")
    assert len(shift.attachments_of_type(AttachmentType.IMPORTED_TOLL)) == 1


def test_user_attachments_are_kept(shift):
    """Positive: receipts and photos are never removed by a toll import."""
    # Arrange
    receipt = ImageAttachment("gas.jpg", AttachmentType.RECEIPT, "Gas")
    photo = ImageAttachment("dash.jpg", AttachmentType.DASHBOARD)
    shift.image_attachments = [receipt, photo]
    # Act
    tm.TollMatcher().match([_charge(18, 0, "1.00")], [shift])
    # Assert
    assert shift.image_attachments[:2] == [receipt, photo]
    assert len(shift.image_attachments) == 3


def test_unmatched_charges_reported_and_other_shifts_untouched(shift):
    """Negative: charges outside every window are reported; unmatched shifts keep their tolls."""
    # Arrange
    idle = Shift(start_date=datetime(2025, 9, 20, 8, 0), end_date=datetime(2025, 9, 20, 12, 0),
                 tolls=Decimal("7.00"))
    stray = _charge(3, 0, "9.99")
    # Act
    report = tm.TollMatcher().match([stray, _charge(18, 0, "1.00")], [shift, idle])
    # Assert
    assert report.unmatched == [stray]
    assert idle.tolls == Decimal("7.00")
    assert idle.image_attachments == []
    assert report.matched_count == 1


def test_new_import_overwrites_previous_total(shift):
    """Positive: tolls reflects only the latest import, not an accumulation."""
    matcher = tm.TollMatcher()
    matcher.match([_charge(18, 0, "4.00")], [shift])
    matcher.match([_charge(18, 0, "1.00")], [shift])
    assert shift.tolls == Decimal("1.00")


def test_csv_import_end_to_end_with_directory_renderer(shift, tmp_path):
    """Positive: CSV text to shift totals with the summary written to disk."""
    # Arrange
    csv_text = (
        "Transaction Entry Date,Location,Plate,Transaction Amount\n"
        '"=Text(""09/16/2025 18:20:33"",""mm/dd/yyyy HH:mm:SS"")",I-95,ABC,-$3.00\n'
        "09/16/2025 19:05:10,I-95,ABC,-$2.00\n"
        "garbage,I-95,ABC,-$2.00\n"
    )
    matcher = tm.TollMatcher(DirectoryTollSummaryRenderer(tmp_path / "summaries"))
    # Act
    report = matcher.import_csv_text(csv_text, [shift])
    # Assert
    assert shift.tolls == Decimal("5.00")
    assert len(report.failures) == 1
    (att,) = shift.image_attachments
    written = (tmp_path / "summaries" / att.filename).read_text(encoding="utf-8")
    assert written.startswith("Toll Summary - Sep 16, 2025")


def test_render_failure_leaves_shift_unchanged(shift):
    """Negative: a renderer error propagates before the shift is modified."""

    class Boom:
        def render(self, summary):
            raise OSError("disk full")

    with pytest.raises(OSError):
        tm.TollMatcher(Boom()).match([_charge(18, 0, "1.00")], [shift])
    assert shift.tolls is None
    assert shift.image_attachments == []


def test_renderers_satisfy_renderer_protocol(tmp_path):
    """Positive: both renderers pass a runtime isinstance check against the protocol."""
    assert isinstance(InMemoryTollSummaryRenderer(), ITollSummaryRenderer)
    assert isinstance(DirectoryTollSummaryRenderer(tmp_path), ITollSummaryRenderer)
    assert not isinstance(object(), ITollSummaryRenderer)
