# rideshare_recon/controllers/transaction_store.py
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Set,
    Union,
)
from uuid import UUID, uuid4

from rideshare_recon.data_model.models import Transaction
from rideshare_recon.utilities import configure_logging
from rideshare_recon.utilities.settings import DUPLICATE_AMOUNT_TOLERANCE

configure_logging()
log = logging.getLogger(__name__)

Predicate = Callable[[Transaction], bool]


class TransactionStore:
    """
    In-memory collection of statement transactions.

    Indexed by id, by source batch and by shift. Records are copied on the way
    in and on the way out, so callers change stored state only through the
    methods below. No operation raises for unknown ids or empty input; the
    missing subset is ignored.

    The store is single-owner: callers serialize access.
    """

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        *,
        duplicate_tolerance: Decimal = Decimal(DUPLICATE_AMOUNT_TOLERANCE),
    ) -> None:
        self.duplicate_tolerance = duplicate_tolerance
        self._items: Dict[UUID, Transaction] = {}
        self._by_batch: Dict[str, Set[UUID]] = {}
        self._by_shift: Dict[UUID, Set[UUID]] = {}
        for txn in transactions:
            self._put(replace(txn))

    # region Indexing

    def _index(self, txn: Transaction) -> None:
        self._by_batch.setdefault(txn.source_batch, set()).add(txn.id)
        if txn.shift_id is not None:
            self._by_shift.setdefault(txn.shift_id, set()).add(txn.id)

    def _unindex(self, txn: Transaction) -> None:
        ids = self._by_batch.get(txn.source_batch)
        if ids is not None:
            ids.discard(txn.id)
            if not ids:
                del self._by_batch[txn.source_batch]
        if txn.shift_id is not None:
            ids = self._by_shift.get(txn.shift_id)
            if ids is not None:
                ids.discard(txn.id)
                if not ids:
                    del self._by_shift[txn.shift_id]

    def _put(self, txn: Transaction) -> None:
        old = self._items.get(txn.id)
        if old is not None:
            self._unindex(old)
        self._items[txn.id] = txn
        self._index(txn)

    def _remove(self, txn_id: UUID) -> bool:
        old = self._items.pop(txn_id, None)
        if old is None:
            return False
        self._unindex(old)
        return True

    def _copies(self, ids: Iterable[UUID]) -> List[Transaction]:
        out = [replace(self._items[i]) for i in ids if i in self._items]
        out.sort(key=lambda t: t.transaction_date)
        return out

    # endregion Indexing

    # region Queries

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, txn_id: object) -> bool:
        return txn_id in self._items

    def get(self, txn_id: UUID) -> Optional[Transaction]:
        txn = self._items.get(txn_id)
        return replace(txn) if txn is not None else None

    def all(self) -> List[Transaction]:
        """Every transaction, oldest first."""
        return self._copies(self._items)

    def for_batch(self, source_batch: str) -> List[Transaction]:
        return self._copies(self._by_batch.get(source_batch, ()))

    def for_shift(self, shift_id: UUID) -> List[Transaction]:
        return self._copies(self._by_shift.get(shift_id, ()))

    def orphans(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[Transaction]:
        """
        Transactions without a shift. The optional range is half-open on the
        match date (event date, else transaction date), the same date the
        shift matcher uses.
        """
        out = []
        for txn in self._items.values():
            if txn.shift_id is not None:
                continue
            when = txn.match_date
            if start is not None and when < start:
                continue
            if end is not None and when >= end:
                continue
            out.append(replace(txn))
        out.sort(key=lambda t: t.transaction_date)
        return out

    def statement_periods(self) -> List[str]:
        """Distinct source batches present, sorted."""
        return sorted(b for b in self._by_batch if b)

    def has_statement_period(self, source_batch: str) -> bool:
        return bool(self._by_batch.get(source_batch))

    def affected_shift_ids(self, source_batch: str) -> Set[UUID]:
        """Shifts that currently hold at least one transaction from `source_batch`."""
        return {
            self._items[i].shift_id  # type: ignore[misc]
            for i in self._by_batch.get(source_batch, ())
            if self._items[i].shift_id is not None
        }

    def find_duplicate(self, txn: Transaction) -> Optional[Transaction]:
        """A stored record with the same date and event type and an amount within tolerance."""
        for other in self._items.values():
            if other.id == txn.id:
                continue
            if (
                other.transaction_date == txn.transaction_date
                and other.event_type == txn.event_type
                and abs(other.amount - txn.amount) < self.duplicate_tolerance
            ):
                return replace(other)
        return None

    # endregion Queries

    # region Mutations

    def save(self, txn: Transaction) -> None:
        """Insert, or replace the record with the same id."""
        self._put(replace(txn))
        log.debug("Saved transaction %s (%s)", txn.id, txn.event_type)

    def save_batch(self, transactions: Iterable[Transaction]) -> None:
        staged = [replace(t) for t in transactions]
        for txn in staged:
            self._put(txn)
        log.debug("Saved %d transactions", len(staged))

    def save_if_not_duplicate(self, txn: Transaction) -> bool:
        if self.find_duplicate(txn) is not None:
            log.debug("Duplicate skipped: %s %s %s", txn.transaction_date, txn.event_type, txn.amount)
            return False
        self.save(txn)
        return True

    def assign(self, txn_ids: Iterable[UUID], shift_id: Optional[UUID]) -> int:
        """Set `shift_id` on each known transaction; returns how many were found."""
        count = 0
        for txn_id in txn_ids:
            txn = self._items.get(txn_id)
            if txn is None:
                continue
            self._put(replace(txn, shift_id=shift_id))
            count += 1
        if count:
            log.debug("Assigned %d transactions to shift %s", count, shift_id)
        return count

    def orphan_for_shifts(self, shift_ids: Iterable[UUID]) -> int:
        """Detach every transaction from the given (deleted) shifts."""
        ids: List[UUID] = []
        for shift_id in set(shift_ids):
            ids.extend(self._by_shift.get(shift_id, ()))
        return self.assign(ids, None)

    def replace_source_batch(
        self, source_batch: str, transactions: Iterable[Transaction]
    ) -> List[Transaction]:
        """
        Remove every record tagged `source_batch`, then insert `transactions`
        stamped with that tag and no shift.

        Records of other batches are left alone. The new state is built aside
        and swapped in, so a failure leaves the store unchanged. Returns the
        inserted records.
        """
        keep: Dict[UUID, Transaction] = {
            i: t for i, t in self._items.items() if t.source_batch != source_batch
        }
        removed = len(self._items) - len(keep)
        inserted: List[Transaction] = []
        for txn in transactions:
            new_id = txn.id if txn.id not in keep else uuid4()
            staged = replace(txn, id=new_id, source_batch=source_batch, shift_id=None)
            keep[new_id] = staged
            inserted.append(staged)

        self._items = {}
        self._by_batch = {}
        self._by_shift = {}
        for txn in keep.values():
            self._put(txn)
        log.info(
            "Replaced batch %r: removed %d, inserted %d", source_batch, removed, len(inserted)
        )
        return [replace(t) for t in inserted]

    def delete(self, target: Union[Predicate, Iterable[UUID]]) -> int:
        """Delete by predicate or by ids; returns how many records were removed."""
        if callable(target):
            ids = [i for i, t in self._items.items() if target(replace(t))]
        else:
            ids = list(target)
        count = sum(1 for i in ids if self._remove(i))
        if count:
            log.info("Deleted %d transactions", count)
        return count

    def clear(self) -> None:
        count = len(self._items)
        self._items.clear()
        self._by_batch.clear()
        self._by_shift.clear()
        log.info("Cleared %d transactions", count)

    # endregion Mutations

    # region Persistence snapshots

    def to_records(self) -> List[Dict[str, Any]]:
        return [t.to_dict() for t in self.all()]

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "TransactionStore":
        return cls(Transaction.from_dict(r) for r in records)

    # endregion Persistence snapshots
