# rideshare_recon/controllers/reconciliation.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Set
from uuid import UUID

from rideshare_recon.data_model.interfaces import IShift
from rideshare_recon.data_model.models import StatementPeriod, TextFragment, TransactionTotals, totals
from rideshare_recon.utilities import configure_logging
from rideshare_recon.utilities.errors import RowParseFailure
from rideshare_recon.utilities.settings import OPEN_SHIFT_WINDOW

from .shift_matcher import ShiftMatcher
from .statement_parser import StatementParser, StatementParseResult
from .transaction_store import TransactionStore

configure_logging()
log = logging.getLogger(__name__)


@dataclass
class StatementImportReport:
    """What a statement import changed, for the UI to display and refresh."""

    source_batch: str
    parsed_count: int = 0
    failures: List[RowParseFailure] = field(default_factory=list)
    replaced_count: int = 0
    assignments: Dict[UUID, List[UUID]] = field(default_factory=dict)
    unmatched_ids: List[UUID] = field(default_factory=list)
    affected_shift_ids: Set[UUID] = field(default_factory=set)
    cleared_shift_ids: Set[UUID] = field(default_factory=set)
    shift_totals: Dict[UUID, TransactionTotals] = field(default_factory=dict)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def assigned_count(self) -> int:
        return sum(len(ids) for ids in self.assignments.values())


@dataclass
class ReconciliationEngine:
    """
    Runs statement imports against a caller-owned TransactionStore.

    Flow for one statement: parse, note which shifts hold the batch now,
    replace the batch, match the new rows to shifts, assign, note which shifts
    hold the batch afterwards, report the union. Parsing completes before the
    store is touched, so a caller can drop a failed import without side
    effects.
    """

    store: TransactionStore
    parser: StatementParser = field(default_factory=StatementParser)
    open_window: timedelta = OPEN_SHIFT_WINDOW

    # --- parse + import ---

    def import_pages(
        self,
        pages: Sequence[Iterable[TextFragment]],
        shifts: Iterable[IShift],
        *,
        period: Optional[StatementPeriod] = None,
        header_text: Optional[str] = None,
    ) -> StatementImportReport:
        result = self.parser.parse_pages(pages, period=period, header_text=header_text)
        return self.import_statement(result, shifts)

    def import_text(self, text: str, shifts: Iterable[IShift]) -> StatementImportReport:
        return self.import_statement(self.parser.parse_text(text), shifts)

    def needs_replace_confirmation(self, source_batch: str) -> bool:
        """True when the store already holds this statement period."""
        return self.store.has_statement_period(source_batch)

    def import_statement(
        self, result: StatementParseResult, shifts: Iterable[IShift]
    ) -> StatementImportReport:
        """
        Replace the statement's batch with `result` and re-derive shift links.

        An empty result (no statement period) changes nothing.
        """
        batch = result.source_batch
        report = StatementImportReport(
            source_batch=batch,
            parsed_count=result.parsed_count,
            failures=list(result.failures),
        )
        if not batch:
            log.info("Empty statement; store left unchanged")
            return report

        before = self.store.affected_shift_ids(batch)
        report.replaced_count = len(self.store.for_batch(batch))
        inserted = self.store.replace_source_batch(batch, result.transactions)

        matcher = ShiftMatcher(shifts, open_window=self.open_window)
        assignments, unmatched = matcher.match_transactions(inserted)
        for shift_id, ids in assignments.items():
            self.store.assign(ids, shift_id)
        report.assignments = assignments
        report.unmatched_ids = unmatched

        after = self.store.affected_shift_ids(batch)
        report.affected_shift_ids = before | after
        for shift_id in report.affected_shift_ids:
            held = self.store.for_shift(shift_id)
            report.shift_totals[shift_id] = totals(held)
            if not held:
                report.cleared_shift_ids.add(shift_id)

        log.info(
            "Imported %s: %d rows (%d failed), %d assigned to %d shifts, %d unmatched",
            batch,
            report.parsed_count,
            report.failed_count,
            report.assigned_count,
            len(assignments),
            len(unmatched),
        )
        return report

    # --- shift lifecycle ---

    def rematch_orphans(
        self,
        shifts: Iterable[IShift],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[UUID, List[UUID]]:
        """Assign orphans in ``[start, end)`` to shifts (e.g. after shifts are added)."""
        orphans = self.store.orphans(start, end)
        assignments, _ = ShiftMatcher(shifts, open_window=self.open_window).match_transactions(
            orphans
        )
        for shift_id, ids in assignments.items():
            self.store.assign(ids, shift_id)
        log.info(
            "Re-matched %d of %d orphans",
            sum(len(v) for v in assignments.values()),
            len(orphans),
        )
        return assignments

    def detach_shifts(self, shift_ids: Iterable[UUID]) -> int:
        """Orphan the transactions of deleted shifts."""
        count = self.store.orphan_for_shifts(shift_ids)
        log.info("Orphaned %d transactions from deleted shifts", count)
        return count

    def shift_totals(self, shift_id: UUID) -> TransactionTotals:
        return totals(self.store.for_shift(shift_id))
