# rideshare_recon/cli.py
"""
Command-line front end: parse a statement or a toll export and write what was
read to CSV, with per-row diagnostics on stderr.
"""
from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

from rideshare_recon.controllers.statement_parser import StatementParser, StatementParseResult
from rideshare_recon.controllers.statement_pdf_loader import parse_statement_pdf
from rideshare_recon.controllers.toll_loader import load_toll_csv
from rideshare_recon.data_model.interfaces import ColumnLayout
from rideshare_recon.utilities.core_util import read_text
from rideshare_recon.utilities.errors import ReconciliationError, RowParseFailure

TRANSACTION_FIELDS = [
    "transaction_date",
    "event_date",
    "event_type",
    "category",
    "amount",
    "toll_reimbursement",
    "needs_manual_verification",
    "source_batch",
]
TOLL_FIELDS = ["date", "location", "plate", "amount"]

_LAYOUTS = {"five": ColumnLayout.FIVE_COLUMN, "six": ColumnLayout.SIX_COLUMN}


def _write_rows(rows: Iterable[Mapping[str, object]], fields: Sequence[str], out: Path) -> int:
    out.parent.mkdir(parents=True, exist_ok=True)
    n = 0
    with out.open("w", newline="", encoding="utf-8") as fp:
        w = csv.DictWriter(fp, fieldnames=list(fields), extrasaction="ignore")
        w.writeheader()
        for r in rows:
            w.writerow(r)
            n += 1
    return n


def _report_failures(failures: Iterable[RowParseFailure]) -> None:
    for f in failures:
        print(f"row {f.row_index}: {f.reason}", file=sys.stderr)


def read_statement(path: Path, layout: Optional[ColumnLayout] = None) -> StatementParseResult:
    """PDFs go through pdfplumber; anything else is read as extracted text."""
    parser = StatementParser(layout=layout)
    if path.suffix.lower() == ".pdf":
        return parse_statement_pdf(path, parser)
    return parser.parse_text(read_text(path))


def _statement(args: argparse.Namespace) -> int:
    result = read_statement(args.input, _LAYOUTS.get(args.layout) if args.layout else None)
    rows: List[dict] = []
    for t in result.transactions:
        d = t.to_dict()
        d["category"] = t.category.value
        rows.append(d)
    n = _write_rows(rows, TRANSACTION_FIELDS, args.output)
    _report_failures(result.failures)
    totals = result.totals()
    print(
        f"{result.source_batch or '(empty statement)'}: {n} transactions, "
        f"{result.failed_count} failed rows, earnings ${totals.total_earnings:,.2f}"
    )
    return 0


def _tolls(args: argparse.Namespace) -> int:
    loaded = load_toll_csv(args.input)
    rows = [
        {
            "date": c.date.isoformat(),
            "location": c.location,
            "plate": c.plate,
            "amount": str(c.amount),
        }
        for c in loaded.charges
    ]
    n = _write_rows(rows, TOLL_FIELDS, args.output)
    _report_failures(loaded.failures)
    print(f"{n} toll charges, {len(loaded.failures)} failed rows")
    return 0


# ------------------------ CLI ------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rideshare-recon",
        description="Parse ride-platform statements and toll exports to CSV.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    st = sub.add_parser("statement", help="Parse a weekly statement (.pdf or extracted .txt)")
    st.add_argument("input", type=Path, help="Statement file")
    st.add_argument("output", type=Path, help="CSV file to write")
    st.add_argument("--layout", choices=sorted(_LAYOUTS),
                    help="Force the column layout instead of reading it from the table header")
    st.set_defaults(func=_statement)

    tl = sub.add_parser("tolls", help="Normalize a toll-authority CSV export")
    tl.add_argument("input", type=Path, help="Toll CSV file")
    tl.add_argument("output", type=Path, help="CSV file to write")
    tl.set_defaults(func=_tolls)
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if not args.input.exists():
        raise SystemExit(f"Input not found: {args.input}")
    if not args.input.is_file():
        raise SystemExit(f"Input path is not a file: {args.input}")
    try:
        return args.func(args)
    except ReconciliationError as e:
        raise SystemExit(f"Cannot import {args.input}: {e}") from e


if __name__ == "__main__":
    sys.exit(main())
