# tests/controllers/test_transaction_store.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

# System under test
import rideshare_recon.controllers.transaction_store as ts
from rideshare_recon.data_model.models import Transaction

BATCH_A = "Oct 13, 2025 - Oct 20, 2025"
BATCH_B = "Oct 20, 2025 - Oct 27, 2025"


def _txn(day: int, amount: str = "10.00", event: str = "UberX", batch: str = BATCH_A, **kw) -> Transaction:
    return Transaction(
        transaction_date=datetime(2025, 10, day, 12, 0),
        event_type=event,
        amount=Decimal(amount),
        source_batch=batch,
        **kw,
    )


def test_save_inserts_and_replaces_by_id():
    """Positive: saving a record with a known id replaces it."""
    # Arrange
    store = ts.TransactionStore()
    t = _txn(14)
    # Act
    store.save(t)
    t.amount = Decimal("99.00")
    store.save(t)
    # Assert
    assert len(store) == 1
    assert store.get(t.id).amount == Decimal("99.00")
    assert t.id in store


def test_records_are_copied_in_and_out():
    """Positive: mutating a returned or saved object never changes stored state."""
    # Arrange
    t = _txn(14)
    store = ts.TransactionStore([t])
    # Act
    t.amount = Decimal("1.00")
    fetched = store.get(t.id)
    fetched.event_type = "Tip"
    # Assert
    stored = store.get(t.id)
    assert stored.amount == Decimal("10.00")
    assert stored.event_type == "UberX"


def test_get_unknown_id_is_none():
    """Negative: unknown ids are not an error."""
    store = ts.TransactionStore()
    assert store.get(uuid4()) is None
    assert store.assign([uuid4()], uuid4()) == 0
    assert store.delete([uuid4()]) == 0


def test_assign_updates_shift_index():
    """Positive: assigned rows are found by shift; reassigning moves them."""
    # Arrange
    t1, t2 = _txn(14), _txn(15)
    store = ts.TransactionStore([t1, t2])
    s1, s2 = uuid4(), uuid4()
    # Act
    assert store.assign([t1.id, t2.id], s1) == 2
    store.assign([t2.id], s2)
    # Assert
    assert [t.id for t in store.for_shift(s1)] == [t1.id]
    assert [t.id for t in store.for_shift(s2)] == [t2.id]
    assert store.affected_shift_ids(BATCH_A) == {s1, s2}


def test_replace_source_batch_only_touches_that_batch():
    """Positive: reimport removes the batch's old rows and leaves other batches alone."""
    # Arrange
    shift = uuid4()
    old_a = _txn(14, shift_id=shift)
    keep_b = _txn(21, batch=BATCH_B, shift_id=shift)
    store = ts.TransactionStore([old_a, keep_b])
    new_rows = [_txn(15, "5.00", "Tip", batch=""), _txn(16, "7.00", batch="")]
    # Act
    inserted = store.replace_source_batch(BATCH_A, new_rows)
    # Assert
    assert old_a.id not in store
    assert [t.amount for t in store.for_batch(BATCH_A)] == [Decimal("5.00"), Decimal("7.00")]
    assert all(t.source_batch == BATCH_A and t.shift_id is None for t in inserted)
    assert [t.id for t in store.for_shift(shift)] == [keep_b.id]
    assert store.affected_shift_ids(BATCH_A) == set()
    assert store.affected_shift_ids(BATCH_B) == {shift}


def test_replace_source_batch_with_nothing_empties_batch():
    """Positive: replacing with no rows removes the statement period."""
    store = ts.TransactionStore([_txn(14), _txn(21, batch=BATCH_B)])
    store.replace_source_batch(BATCH_A, [])
    assert store.statement_periods() == [BATCH_B]
    assert not store.has_statement_period(BATCH_A)


def test_replace_source_batch_renumbers_colliding_ids():
    """Negative: an incoming id owned by another batch gets a fresh id."""
    # Arrange
    other = _txn(21, batch=BATCH_B)
    store = ts.TransactionStore([other])
    incoming = _txn(14, batch="", id=other.id)
    # Act
    (inserted,) = store.replace_source_batch(BATCH_A, [incoming])
    # Assert
    assert inserted.id != other.id
    assert store.get(other.id).source_batch == BATCH_B
    assert len(store) == 2


def test_delete_by_predicate_and_ids():
    """Positive: delete accepts a predicate or an id list."""
    # Arrange
    t1, t2, t3 = _txn(14, event="Tip"), _txn(15), _txn(16)
    store = ts.TransactionStore([t1, t2, t3])
    # Act
    by_pred = store.delete(lambda t: t.event_type == "Tip")
    by_ids = store.delete([t2.id])
    # Assert
    assert (by_pred, by_ids) == (1, 1)
    assert [t.id for t in store.all()] == [t3.id]
    store.clear()
    assert len(store) == 0 and store.statement_periods() == []


def test_orphans_range_uses_match_date_half_open():
    """Positive: orphan range is [start, end) on event date, else transaction date."""
    # Arrange
    inside = _txn(14)
    by_event = _txn(10, event_date=datetime(2025, 10, 15, 9, 0))
    at_end = _txn(20)
    assigned = _txn(15, shift_id=uuid4())
    store = ts.TransactionStore([inside, by_event, at_end, assigned])
    # Act
    out = store.orphans(datetime(2025, 10, 14), datetime(2025, 10, 20, 12, 0))
    # Assert
    assert {t.id for t in out} == {inside.id, by_event.id}
    assert len(store.orphans()) == 3


def test_statement_periods_sorted_and_distinct():
    store = ts.TransactionStore([_txn(21, batch=BATCH_B), _txn(14), _txn(15), _txn(1, batch="")])
    assert store.statement_periods() == [BATCH_A, BATCH_B]


def test_find_duplicate_within_tolerance():
    """Positive/Negative: same date and event with amount under the tolerance is a duplicate."""
    # Arrange
    stored = _txn(14, "10.00")
    store = ts.TransactionStore([stored])
    # Act / Assert
    assert store.find_duplicate(_txn(14, "10.005")).id == stored.id
    assert store.find_duplicate(_txn(14, "10.01")) is None
    assert store.find_duplicate(_txn(14, "10.00", event="Tip")) is None
    assert not store.save_if_not_duplicate(_txn(14, "10.00"))
    assert store.save_if_not_duplicate(_txn(15, "10.00"))
    assert len(store) == 2


def test_orphan_for_shifts_detaches_all_rows_of_deleted_shift():
    """Positive: rows of a deleted shift become orphans; other shifts keep theirs."""
    # Arrange
    gone, kept = uuid4(), uuid4()
    rows = [_txn(14, shift_id=gone), _txn(15, batch=BATCH_B, shift_id=gone), _txn(16, shift_id=kept)]
    store = ts.TransactionStore(rows)
    # Act
    count = store.orphan_for_shifts([gone])
    # Assert
    assert count == 2
    assert store.for_shift(gone) == []
    assert len(store.for_shift(kept)) == 1
    assert len(store.orphans()) == 2


def test_records_snapshot_restores_store():
    """Positive: to_records/from_records keeps ids, batches and shift links."""
    # Arrange
    shift = uuid4()
    store = ts.TransactionStore([_txn(14, shift_id=shift), _txn(21, batch=BATCH_B)])
    # Act
    restored = ts.TransactionStore.from_records(store.to_records())
    # Assert
    assert [t.id for t in restored.all()] == [t.id for t in store.all()]
    assert restored.statement_periods() == [BATCH_A, BATCH_B]
    assert len(restored.for_shift(shift)) == 1
