# rideshare_recon/controllers/shift_matcher.py
"""
Time-window matching of dated items (toll charges, statement rows) to shifts.

A moment belongs to a shift when ``start <= moment <= effective_end``; the
effective end is the shift's end date or, for a shift still open, its start
plus a fixed window. When several windows contain the moment the narrowest one
wins.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from rideshare_recon.data_model.interfaces import IShift, ITransaction, TransactionCategory
from rideshare_recon.utilities.settings import OPEN_SHIFT_WINDOW


def effective_end(shift: IShift, open_window: timedelta = OPEN_SHIFT_WINDOW) -> datetime:
    return shift.end_date if shift.end_date is not None else shift.start_date + open_window


def _sort_key_for_candidate(
    shift: IShift, order: int, open_window: timedelta
) -> Tuple[timedelta, datetime, int]:
    """
    Deterministic tie-breaker:
      • Narrowest window first
      • Then earliest start
      • Then the order the shifts were given in
    """
    return (effective_end(shift, open_window) - shift.start_date, shift.start_date, order)


class ShiftMatcher:
    """Finds the shift whose window contains a moment."""

    def __init__(
        self, shifts: Iterable[IShift], *, open_window: timedelta = OPEN_SHIFT_WINDOW
    ) -> None:
        self.shifts: List[IShift] = list(shifts)
        self.open_window = open_window

    def candidates(self, moment: datetime) -> List[IShift]:
        """Every shift containing `moment`, best first."""
        hits = [
            (s, i)
            for i, s in enumerate(self.shifts)
            if s.start_date <= moment <= effective_end(s, self.open_window)
        ]
        hits.sort(key=lambda t: _sort_key_for_candidate(t[0], t[1], self.open_window))
        return [s for s, _ in hits]

    def match(self, moment: datetime) -> Optional[IShift]:
        hits = self.candidates(moment)
        return hits[0] if hits else None

    def match_transactions(
        self, transactions: Sequence[ITransaction]
    ) -> Tuple[Dict[UUID, List[UUID]], List[UUID]]:
        """
        Group transaction ids by the shift containing their match date.

        Ignore-category rows (bank transfers) are never matched and are not
        reported as unmatched either. Returns ``(by_shift, unmatched_ids)``.
        """
        by_shift: Dict[UUID, List[UUID]] = {}
        unmatched: List[UUID] = []
        for txn in transactions:
            if txn.category is TransactionCategory.IGNORE:
                continue
            shift = self.match(txn.match_date)
            if shift is None:
                unmatched.append(txn.id)
            else:
                by_shift.setdefault(shift.id, []).append(txn.id)
        return by_shift, unmatched
