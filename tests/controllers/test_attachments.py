# tests/controllers/test_attachments.py
from __future__ import annotations

from datetime import datetime
from uuid import uuid4

# System under test
import rideshare_recon.controllers.attachments as at
from rideshare_recon.data_model.interfaces import AttachmentType
from rideshare_recon.data_model.models import ImageAttachment, Shift
from rideshare_recon.utilities.flags import InMemoryFlagStore, JsonFlagStore


def _shift(*attachments: ImageAttachment) -> Shift:
    return Shift(start_date=datetime(2025, 9, 16, 17, 0), image_attachments=list(attachments))


def test_commit_removals_only_removes_marked():
    """Positive: marked attachments go and are returned; the rest stay in order."""
    # Arrange
    a, b, c = ImageAttachment("a.jpg"), ImageAttachment("b.jpg"), ImageAttachment("c.jpg")
    shift = _shift(a, b, c)
    # Act
    removed = at.commit_removals(shift, [b.id, uuid4()])
    # Assert
    assert removed == [b]
    assert shift.image_attachments == [a, c]


def test_commit_removals_with_nothing_pending():
    """Negative: an empty pending set is a no-op."""
    a = ImageAttachment("a.jpg")
    shift = _shift(a)
    assert at.commit_removals(shift, []) == []
    assert shift.image_attachments == [a]


def test_migration_converts_legacy_summaries_once():
    """Positive: receipt-typed toll summaries are retyped, and only on the first run."""
    # Arrange
    legacy = ImageAttachment("t.txt", AttachmentType.RECEIPT, "Toll Summary - 3 transactions")
    receipt = ImageAttachment("r.jpg", AttachmentType.RECEIPT, "Gas receipt")
    shifts = [_shift(legacy, receipt)]
    flags = InMemoryFlagStore()
    # Act
    first = at.migrate_legacy_toll_attachments(shifts, flags)
    legacy_again = ImageAttachment("u.txt", AttachmentType.RECEIPT, "Toll Summary - 1 transactions")
    shifts[0].image_attachments.append(legacy_again)
    second = at.migrate_legacy_toll_attachments(shifts, flags)
    # Assert
    assert (first, second) == (1, 0)
    assert legacy.type is AttachmentType.IMPORTED_TOLL
    assert receipt.type is AttachmentType.RECEIPT
    assert legacy_again.type is AttachmentType.RECEIPT


def test_marker_must_be_a_prefix():
    """Negative: descriptions that only mention the marker are not converted."""
    att = ImageAttachment("x.jpg", AttachmentType.RECEIPT, "Receipt with Toll Summary inside")
    assert not at.is_legacy_toll_summary(att)
    assert not at.is_legacy_toll_summary(ImageAttachment("y.txt", AttachmentType.OTHER, "Toll Summary - 1"))


def test_migration_flag_persists_in_json_file(tmp_path):
    """Positive: the flag survives a new flag store over the same file."""
    # Arrange
    path = tmp_path / "state" / "flags.json"
    legacy = ImageAttachment("t.txt", AttachmentType.RECEIPT, "Toll Summary - 2 transactions")
    # Act
    at.migrate_legacy_toll_attachments([_shift(legacy)], JsonFlagStore(path))
    later = ImageAttachment("u.txt", AttachmentType.RECEIPT, "Toll Summary - 2 transactions")
    count = at.migrate_legacy_toll_attachments([_shift(later)], JsonFlagStore(path))
    # Assert
    assert count == 0
    assert later.type is AttachmentType.RECEIPT
