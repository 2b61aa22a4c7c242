# rideshare_recon/controllers/statement_parser.py
"""
StatementParser: positioned text fragments to Transactions.

Key points:
• Fragments are grouped per page into visual rows (y within a tolerance band) and
  each row is read left to right.
• Every row is classified (header, footer, leading-date, continuation) and fed
  through a small state machine; a transaction block runs from one leading-date
  row up to the next one. Inside an open block a date-led row without a weekday
  needs the amount and payout figures to start a new transaction.
• Page footers and summary lines ("Total earnings ...") close the table.
• Row 1 carries the date, time, event text and the amount columns. Row 2 carries
  the event stamp and a restated balance. Rows 3+ are free-text description.
• A bad block, or a row with figures outside any block, becomes a
  RowParseFailure diagnostic; parsing carries on.
• The only fatal conditions are a missing statement period and a missing table
  header, both detected before any row is parsed.

Public surface:
    parse_statement_period(text) -> StatementPeriod | None
    detect_layout(header_text) -> ColumnLayout
    group_rows(fragments, tolerance) -> list[list[TextFragment]]
    split_text_line(line, y) -> list[TextFragment]
    class StatementParser:
        def parse_pages(pages, *, period=None, header_text=None) -> StatementParseResult
        def parse_text(text, *, period=None) -> StatementParseResult
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from rideshare_recon.data_model.interfaces import ColumnLayout, TransactionCategory
from rideshare_recon.data_model.models import (
    StatementPeriod,
    TextFragment,
    Transaction,
    TransactionTotals,
    totals,
)
from rideshare_recon.utilities import configure_logging
from rideshare_recon.utilities.converters_scalar import (
    CLOCK_RE,
    FIGURES_ONLY_RE,
    MONTH_DAY_RE,
    MONTH_NAME,
    STAMP_RE,
    TRAILING_FIGURES_RE,
    WEEKDAY_PREFIX,
    figures_in,
    month_number,
    statement_datetime,
    stamp_datetime,
)
from rideshare_recon.utilities.core_util import collapse_ws, is_null_or_whitespace
from rideshare_recon.utilities.errors import (
    MalformedAmount,
    MalformedDate,
    RowParseFailure,
    UnrecognizedLayout,
)
from rideshare_recon.utilities.settings import ROW_Y_TOLERANCE, STATEMENT_PERIOD_HOUR

configure_logging()
log = logging.getLogger(__name__)

_PERIOD_RE = re.compile(
    r"([A-Za-z]+)\s+(\d{1,2}),\s+(\d{4})\s+%d\s*AM\s*-\s*"
    r"([A-Za-z]+)\s+(\d{1,2}),\s+(\d{4})\s+%d\s*AM"
    % (STATEMENT_PERIOD_HOUR, STATEMENT_PERIOD_HOUR),
    re.IGNORECASE,
)
_TOLL_COLUMN_RE = re.compile(r"refunds\s*(?:&|&amp;|and)\s*expenses", re.IGNORECASE)
_FOOTER_RE = re.compile(r"^page\s+\d+\s+of\s+\d+$", re.IGNORECASE)
# statement summary lines printed after the transaction table
_SUMMARY_RE = re.compile(
    r"^(?:total|totals|subtotal|summary|(?:starting|opening|ending|closing)\s+balance)\b",
    re.IGNORECASE,
)
_FIGURE_TOKEN = r"[-+]?\$\d[\d,]*(?:\.\d+)?"
# amount + payout; the balance may sit on row 2
_MIN_ROW_FIGURES = 2
_TEXT_LINE_RE = re.compile(
    rf"^\s*(?P<date>{WEEKDAY_PREFIX}?{MONTH_NAME}\.?\s+\d{{1,2}})"
    rf"(?:\s+(?P<time>\d{{1,2}}:\d{{2}}\s*[AaPp][Mm]))?"
    rf"(?=\s|$)(?P<rest>.*)$"
)


# ---------- helpers ----------


def parse_statement_period(text: str) -> Optional[StatementPeriod]:
    """
    Find "Oct 13, 2025 4 AM - Oct 20, 2025 4 AM" in header text.

    Returns None when no period line is present.
    """
    m = _PERIOD_RE.search(text or "")
    if not m:
        return None
    try:
        start = datetime(
            int(m.group(3)), month_number(m.group(1)), int(m.group(2)), STATEMENT_PERIOD_HOUR
        )
        end = datetime(
            int(m.group(6)), month_number(m.group(4)), int(m.group(5)), STATEMENT_PERIOD_HOUR
        )
    except (MalformedDate, ValueError):
        log.warning("Statement period found but not a valid date: %r", m.group(0))
        return None
    return StatementPeriod(start=start, end=end)


def detect_layout(header_text: str) -> ColumnLayout:
    """A "Refunds & Expenses" column means the six-column (toll) layout."""
    if _TOLL_COLUMN_RE.search(header_text or ""):
        return ColumnLayout.SIX_COLUMN
    return ColumnLayout.FIVE_COLUMN


def is_table_header(row_text: str) -> bool:
    lowered = row_text.lower()
    return "processed" in lowered and "event" in lowered


def group_rows(
    fragments: Iterable[TextFragment], tolerance: float = ROW_Y_TOLERANCE
) -> List[List[TextFragment]]:
    """
    Cluster one page's fragments into visual rows.

    Fragments are visited top to bottom; a fragment joins the current row when
    its y is within `tolerance` of the row's first fragment. Each row is
    returned ordered by x.
    """
    ordered = sorted(
        (f for f in fragments if not is_null_or_whitespace(f.text)),
        key=lambda f: (f.y, f.x),
    )
    rows: List[List[TextFragment]] = []
    anchor_y = 0.0
    for frag in ordered:
        if rows and abs(frag.y - anchor_y) < tolerance:
            rows[-1].append(frag)
        else:
            rows.append([frag])
            anchor_y = frag.y
    return [sorted(r, key=lambda f: f.x) for r in rows]


def split_text_line(line: str, y: float = 0.0) -> List[TextFragment]:
    """
    Turn one line of plain statement text into positioned fragments.

    "Oct 19 7:49 PM UberX $21.55 $2.71 $0.00 $448.32" becomes the date, the
    time, the event text and one fragment per trailing figure. A line made of
    only a date/time stamp (plus figures) keeps the stamp as one fragment so it
    reads as an event stamp rather than the start of a new transaction. x is
    the character offset of each fragment.
    """
    if is_null_or_whitespace(line):
        return []
    frags: List[TextFragment] = []
    pos = 0
    body = line
    m = _TEXT_LINE_RE.match(line)
    if m:
        rest = m.group("rest")
        has_weekday = re.match(WEEKDAY_PREFIX, m.group("date")) is not None
        stamp_only = (
            bool(m.group("time"))
            and not has_weekday
            and FIGURES_ONLY_RE.match(rest.strip() or "$0") is not None
        )
        if stamp_only:
            stamp = collapse_ws(line[m.start("date") : m.end("time")])
            frags.append(TextFragment(stamp, float(m.start("date")), y))
        else:
            frags.append(TextFragment(collapse_ws(m.group("date")), float(m.start("date")), y))
            if m.group("time"):
                frags.append(TextFragment(collapse_ws(m.group("time")), float(m.start("time")), y))
        pos = m.start("rest")
        body = rest

    tail = TRAILING_FIGURES_RE.match(body)
    text_part = tail.group("text") if tail else body
    if text_part.strip():
        offset = pos + len(body) - len(body.lstrip())
        frags.append(TextFragment(collapse_ws(text_part), float(offset), y))
    if tail and tail.group("figures"):
        fig_start = pos + tail.start("figures")
        for fm in re.finditer(_FIGURE_TOKEN, tail.group("figures")):
            frags.append(TextFragment(fm.group(0), float(fig_start + fm.start()), y))
    return frags


def _split_trailing_figures(text: str) -> tuple[str, List[Decimal]]:
    """("Transferred To Bank -$473.61") -> ("Transferred To Bank", [-473.61])."""
    if FIGURES_ONLY_RE.match(text):
        return "", figures_in(text)
    m = TRAILING_FIGURES_RE.match(text)
    if not m or not m.group("figures").strip():
        return text, []
    return m.group("text"), figures_in(m.group("figures"))


# ---------- rows ----------


class RowKind(Enum):
    HEADER = "header"
    FOOTER = "footer"
    LEADING_DATE = "leading_date"
    CONTINUATION = "continuation"


@dataclass(frozen=True)
class Row:
    """One visual row: its page, document-wide ordinal and fragments."""

    page: int
    index: int
    fragments: tuple[TextFragment, ...]

    @property
    def text(self) -> str:
        return " ".join(f.text for f in self.fragments)

    @property
    def kind(self) -> RowKind:
        return classify_row(self)


def classify_row(row: Row) -> RowKind:
    text = row.text
    if is_table_header(text):
        return RowKind.HEADER
    flat = collapse_ws(text)
    if _FOOTER_RE.match(flat) or _SUMMARY_RE.match(flat):
        return RowKind.FOOTER
    if row.fragments and MONTH_DAY_RE.match(row.fragments[0].text.strip()):
        return RowKind.LEADING_DATE
    return RowKind.CONTINUATION


def figure_count(row: Row) -> int:
    return len(re.findall(_FIGURE_TOKEN, row.text))


def starts_transaction(row: Row) -> bool:
    """
    Whether a date-led row opens a new transaction while another is open.

    A printed weekday ("Sat, Oct 19") always does. Without one, the row needs
    at least the amount and payout figures; a description line that happens
    to begin with a "Mon D H:MM AM" stamp carries at most the figures quoted
    in its text.
    """
    if not row.fragments:
        return False
    if re.match(WEEKDAY_PREFIX, row.fragments[0].text.strip()):
        return True
    return figure_count(row) >= _MIN_ROW_FIGURES


# ---------- result ----------


@dataclass
class StatementParseResult:
    """Transactions plus per-row diagnostics for one statement."""

    period: Optional[StatementPeriod]
    layout: Optional[ColumnLayout]
    transactions: List[Transaction] = field(default_factory=list)
    failures: List[RowParseFailure] = field(default_factory=list)

    @property
    def source_batch(self) -> str:
        return self.period.label if self.period else ""

    @property
    def parsed_count(self) -> int:
        return len(self.transactions)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def is_empty(self) -> bool:
        return not self.transactions and not self.failures

    def totals(self) -> TransactionTotals:
        return totals(self.transactions)


# ---------- core class ----------


class StatementParser:
    """
    Parses ride-platform statements.

    Parameters
    ----------
    layout : ColumnLayout, optional
        Force a column layout. When omitted the layout comes from the table
        header and a statement without one is rejected.
    row_tolerance : float
        Vertical distance under which fragments share a visual row.
    """

    def __init__(
        self,
        *,
        layout: Optional[ColumnLayout] = None,
        row_tolerance: float = ROW_Y_TOLERANCE,
    ) -> None:
        self.layout = layout
        self.row_tolerance = row_tolerance

    # --- entry points ---

    def parse_pages(
        self,
        pages: Sequence[Iterable[TextFragment]],
        *,
        period: Optional[StatementPeriod] = None,
        header_text: Optional[str] = None,
    ) -> StatementParseResult:
        """
        Parse a statement given as fragments per page.

        Raises
        ------
        UnrecognizedLayout
            No statement period (and none passed in), or no table header (and
            no layout forced on the parser).
        """
        rows = self._rows(pages)
        if not rows:
            log.info("Statement has no text; nothing to import")
            return StatementParseResult(period=period, layout=self.layout)

        if period is None:
            source = header_text if header_text is not None else "\n".join(r.text for r in rows)
            period = parse_statement_period(source)
        if period is None:
            raise UnrecognizedLayout("No statement period found in statement header")

        headers = [r for r in rows if r.kind is RowKind.HEADER]
        if not headers and self.layout is None:
            raise UnrecognizedLayout("No transaction table header found in statement")
        first_layout = self.layout or detect_layout(headers[0].text)
        log.info("Statement period %s, layout %s", period.label, first_layout.name)

        result = StatementParseResult(period=period, layout=first_layout)
        self._run(rows, period, result)
        log.info(
            "Parsed %d transactions (%d failed rows) for %s",
            result.parsed_count,
            result.failed_count,
            period.label,
        )
        return result

    def parse_text(
        self, text: str, *, period: Optional[StatementPeriod] = None
    ) -> StatementParseResult:
        """
        Parse a plain-text statement. Pages are separated by form feeds and
        every line becomes one visual row.
        """
        step = self.row_tolerance * 3
        pages: List[List[TextFragment]] = []
        for page_text in (text or "").split("\f"):
            frags: List[TextFragment] = []
            for i, line in enumerate(page_text.splitlines()):
                frags.extend(split_text_line(line, y=i * step))
            pages.append(frags)
        return self.parse_pages(pages, period=period, header_text=text or "")

    # --- state machine ---

    def _rows(self, pages: Sequence[Iterable[TextFragment]]) -> List[Row]:
        rows: List[Row] = []
        for page_no, frags in enumerate(pages, start=1):
            for grouped in group_rows(frags, self.row_tolerance):
                rows.append(Row(page=page_no, index=len(rows), fragments=tuple(grouped)))
        return rows

    def _run(
        self,
        rows: List[Row],
        period: StatementPeriod,
        result: StatementParseResult,
    ) -> None:
        layout: Optional[ColumnLayout] = self.layout
        block: List[Row] = []
        in_table = False
        current_page = 0
        pages_with_header = {r.page for r in rows if r.kind is RowKind.HEADER}

        def flush() -> None:
            if block and layout is not None:
                self._emit(block, layout, period, result)
            block.clear()

        for row in rows:
            if row.page != current_page:
                flush()
                current_page = row.page
                # a page without its own header continues the table
                in_table = layout is not None and row.page not in pages_with_header

            kind = row.kind
            if kind is RowKind.HEADER:
                flush()
                layout = self.layout or detect_layout(row.text)
                in_table = True
            elif kind is RowKind.FOOTER:
                flush()
                in_table = False
            elif not in_table:
                continue
            elif kind is RowKind.LEADING_DATE and (not block or starts_transaction(row)):
                flush()
                block.append(row)
            elif block:
                block.append(row)
            elif figure_count(row):
                failure = RowParseFailure(row.text, "amounts found outside any transaction", row.index)
                log.warning("Row %s skipped: %s", row.index, failure.reason)
                result.failures.append(failure)
            else:
                log.debug("Skipping row outside any transaction: %r", row.text)
        flush()

    def _emit(
        self,
        block: List[Row],
        layout: ColumnLayout,
        period: StatementPeriod,
        result: StatementParseResult,
    ) -> None:
        try:
            txn = self.parse_block(block, layout, period)
        except RowParseFailure as e:
            log.warning("Row %s skipped: %s", e.row_index, e.reason)
            result.failures.append(e)
            return
        result.transactions.append(txn)

    # --- one transaction ---

    def parse_block(
        self, block: Sequence[Row], layout: ColumnLayout, period: StatementPeriod
    ) -> Transaction:
        """Build one Transaction from its visual rows (first row leads with a date)."""
        source = "\n".join(r.text for r in block)
        index = block[0].index
        try:
            return self._parse_block(block, layout, period, source)
        except (MalformedAmount, MalformedDate) as e:
            raise RowParseFailure(source, str(e), index) from e
        except RowParseFailure as e:
            if e.row_index is None:
                raise RowParseFailure(source, e.reason, index) from e
            raise

    def _parse_block(
        self,
        block: Sequence[Row],
        layout: ColumnLayout,
        period: StatementPeriod,
        source: str,
    ) -> Transaction:
        anchor = period.end.date()
        first = list(block[0].fragments)
        date_text = first.pop(0).text
        time_text: Optional[str] = None
        if first and CLOCK_RE.match(first[0].text.strip()):
            time_text = first.pop(0).text

        event_parts: List[str] = []
        figures: List[Decimal] = []
        event_date: Optional[datetime] = None
        for frag in first:
            text, found = _split_trailing_figures(frag.text)
            if text.strip():
                event_parts.append(text)
            figures.extend(found)

        # Row 2: event stamp, maybe the processed time, a restated balance.
        row2_figures: List[Decimal] = []
        if len(block) > 1:
            for frag in block[1].fragments:
                txt = frag.text.strip()
                if CLOCK_RE.match(txt):
                    if time_text is None:
                        time_text = txt
                    continue
                if STAMP_RE.match(txt):
                    event_date = event_date or stamp_datetime(txt, anchor)
                    continue
                text, found = _split_trailing_figures(txt)
                row2_figures.extend(found)
                if text.strip():
                    event_parts.append(text)

        # Rows 3+: description text, kept verbatim.
        for row in block[2:]:
            for frag in row.fragments:
                txt = frag.text.strip()
                if event_date is None and STAMP_RE.match(txt):
                    event_date = stamp_datetime(txt, anchor)
                    continue
                event_parts.append(txt)

        if time_text is None:
            raise RowParseFailure(source, "no time found for transaction date")
        transaction_date = statement_datetime(date_text, time_text, anchor)

        event_type = collapse_ws(" ".join(event_parts))
        aligned, manual = self._align_figures(figures, layout, bool(row2_figures), source)

        toll: Optional[Decimal] = None
        if (
            layout.has_toll_column
            and "toll" in aligned
            and TransactionCategory.from_event_type(event_type) is TransactionCategory.NET_FARE
        ):
            toll = aligned["toll"]

        # without a stamp the shift match falls back to the processed time
        if not event_type or event_date is None:
            manual = True

        return Transaction(
            transaction_date=transaction_date,
            event_type=event_type,
            amount=aligned["amount"],
            source_batch=period.label,
            event_date=event_date,
            toll_reimbursement=toll,
            needs_manual_verification=manual,
            source_row=source,
        )

    @staticmethod
    def _align_figures(
        figures: List[Decimal],
        layout: ColumnLayout,
        balance_on_row2: bool,
        source: str,
    ) -> tuple[Dict[str, Decimal], bool]:
        """
        Map row-1 figures onto the layout's columns, reading right to left.

        Returns the column mapping and whether a fallback was needed.
        """
        slots = layout.amount_slots
        n = len(figures)
        if n == 0:
            raise RowParseFailure(source, "no amount found")
        if n >= len(slots):
            aligned = dict(zip(slots, figures[-len(slots):]))
            if n > len(slots):
                # extra figures: the one nearest the event text is the amount
                aligned["amount"] = figures[0]
                return aligned, True
            return aligned, False
        if n == len(slots) - 1:
            # balance printed on row 2
            return dict(zip(slots[:-1], figures)), not balance_on_row2
        return {"amount": figures[0]}, True
