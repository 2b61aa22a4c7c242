# rideshare_recon/controllers/toll_matcher.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from typing import IO, Dict, Iterable, List, Optional, Union
from uuid import UUID

from rideshare_recon.data_model.interfaces import AttachmentType, IShift, ITollSummaryRenderer
from rideshare_recon.data_model.models import ImageAttachment, TollCharge, TollSummary
from rideshare_recon.utilities import configure_logging
from rideshare_recon.utilities.errors import RowParseFailure
from rideshare_recon.utilities.settings import OPEN_SHIFT_WINDOW

from .shift_matcher import ShiftMatcher
from .toll_loader import TollLoadResult, load_toll_csv, parse_toll_csv
from .toll_summary_renderer import InMemoryTollSummaryRenderer

configure_logging()
log = logging.getLogger(__name__)


@dataclass
class TollImportReport:
    """
    Outcome of one toll import.

    `removed_attachments` holds the toll summaries displaced from each shift;
    their stored files are the caller's to delete.
    """

    updated_shifts: List[IShift] = field(default_factory=list)
    matched: Dict[UUID, List[TollCharge]] = field(default_factory=dict)
    unmatched: List[TollCharge] = field(default_factory=list)
    failures: List[RowParseFailure] = field(default_factory=list)
    removed_attachments: Dict[UUID, List[ImageAttachment]] = field(default_factory=dict)
    images_generated: int = 0

    @property
    def totals(self) -> Dict[UUID, Decimal]:
        return {
            shift_id: sum((c.amount for c in charges), Decimal("0"))
            for shift_id, charges in self.matched.items()
        }

    @property
    def matched_count(self) -> int:
        return sum(len(c) for c in self.matched.values())


class TollMatcher:
    """
    Assigns toll charges to shifts and rewrites each matched shift's toll total
    and toll-summary attachment.

    Re-importing the same charges gives the same `tolls` and still exactly one
    summary per shift: the total is overwritten and the old summary removed
    before the new one is added. Shifts with no matched charge are not touched.
    """

    def __init__(
        self,
        renderer: Optional[ITollSummaryRenderer] = None,
        *,
        open_window: timedelta = OPEN_SHIFT_WINDOW,
    ) -> None:
        self.renderer: ITollSummaryRenderer = renderer or InMemoryTollSummaryRenderer()
        self.open_window = open_window

    def import_csv(
        self, source: Union[str, Path, IO[str]], shifts: Iterable[IShift]
    ) -> TollImportReport:
        return self._import(load_toll_csv(source), shifts)

    def import_csv_text(self, text: str, shifts: Iterable[IShift]) -> TollImportReport:
        return self._import(parse_toll_csv(text), shifts)

    def _import(self, loaded: TollLoadResult, shifts: Iterable[IShift]) -> TollImportReport:
        report = self.match(loaded.charges, shifts)
        report.failures = list(loaded.failures)
        return report

    def match(
        self, charges: Iterable[TollCharge], shifts: Iterable[IShift]
    ) -> TollImportReport:
        shift_list = list(shifts)
        by_id = {s.id: s for s in shift_list}
        matcher = ShiftMatcher(shift_list, open_window=self.open_window)
        report = TollImportReport()

        for charge in charges:
            shift = matcher.match(charge.date)
            if shift is None:
                log.debug("No shift for toll at %s (%s)", charge.date, charge.amount)
                report.unmatched.append(charge)
                continue
            report.matched.setdefault(shift.id, []).append(charge)

        for shift_id, matched in report.matched.items():
            shift = by_id[shift_id]
            summary = TollSummary(
                shift_id=shift.id,
                shift_start=shift.start_date,
                charges=tuple(matched),
            )
            attachment = self.renderer.render(summary)
            attachment.type = AttachmentType.IMPORTED_TOLL
            report.images_generated += 1

            removed = [a for a in shift.image_attachments if a.type is AttachmentType.IMPORTED_TOLL]
            shift.image_attachments = [
                a for a in shift.image_attachments if a.type is not AttachmentType.IMPORTED_TOLL
            ]
            shift.image_attachments.append(attachment)
            shift.tolls = summary.total
            if removed:
                report.removed_attachments[shift.id] = removed
            report.updated_shifts.append(shift)
            log.debug(
                "Shift %s: %d tolls, total %s, replaced %d summaries",
                shift.id,
                len(matched),
                summary.total,
                len(removed),
            )

        log.info(
            "Toll import: %d matched to %d shifts, %d unmatched",
            report.matched_count,
            len(report.updated_shifts),
            len(report.unmatched),
        )
        return report
