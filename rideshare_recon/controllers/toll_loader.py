# rideshare_recon/controllers/toll_loader.py
"""
Toll-authority CSV exports to TollCharge records.

Columns are found by header substring, so exports that rename or reorder
columns ("Transaction Entry Date" / "Entry Date", "Transaction Amount" /
"Amount", "Location", "Plate") still load. Cells may be plain text or wrapped
in a templated formula (``=Text("09/16/2025 18:20:33","mm/dd/yyyy HH:mm:SS")``).
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Optional, Sequence, Union

import pandas as pd

from rideshare_recon.data_model.models import UNKNOWN_LOCATION, UNKNOWN_PLATE, TollCharge
from rideshare_recon.utilities import configure_logging
from rideshare_recon.utilities.converters_scalar import clean_amount, clean_date
from rideshare_recon.utilities.core_util import is_null_or_whitespace, read_text
from rideshare_recon.utilities.errors import (
    MalformedAmount,
    MalformedDate,
    RowParseFailure,
    UnrecognizedLayout,
)

configure_logging()
log = logging.getLogger(__name__)

TOLL_DATE_FORMAT = "%m/%d/%Y %H:%M:%S"

_DATE_HEADERS = ("transaction entry date", "entry date", "date")
_AMOUNT_HEADERS = ("transaction amount", "amount")
_LOCATION_HEADERS = ("location",)
_PLATE_HEADERS = ("plate",)


@dataclass
class TollLoadResult:
    charges: List[TollCharge] = field(default_factory=list)
    failures: List[RowParseFailure] = field(default_factory=list)


@dataclass(frozen=True)
class TollColumns:
    date: str
    amount: str
    location: Optional[str] = None
    plate: Optional[str] = None


def _find_column(columns: Sequence[str], needles: Sequence[str]) -> Optional[str]:
    lowered = [(c, str(c).strip().lower()) for c in columns]
    for needle in needles:
        for original, low in lowered:
            if needle in low:
                return original
    return None


def detect_columns(columns: Sequence[str]) -> TollColumns:
    """
    Map CSV headers to toll fields.

    Raises
    ------
    UnrecognizedLayout
        When no date or no amount column exists.
    """
    date_col = _find_column(columns, _DATE_HEADERS)
    amount_col = _find_column(columns, _AMOUNT_HEADERS)
    if date_col is None or amount_col is None:
        raise UnrecognizedLayout(
            f"Toll CSV needs date and amount columns; found {list(columns)!r}"
        )
    return TollColumns(
        date=date_col,
        amount=amount_col,
        location=_find_column(columns, _LOCATION_HEADERS),
        plate=_find_column(columns, _PLATE_HEADERS),
    )


def parse_toll_csv(text: str) -> TollLoadResult:
    """
    Parse toll CSV text.

    Empty text and a header-only file give an empty result. A bad row is
    recorded in `failures` and the rest still load.
    """
    if is_null_or_whitespace(text):
        return TollLoadResult()
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError:
        return TollLoadResult()
    return parse_toll_frame(frame)


def parse_toll_frame(frame: pd.DataFrame) -> TollLoadResult:
    cols = detect_columns(list(frame.columns))
    result = TollLoadResult()
    for row_no, record in enumerate(frame.to_dict(orient="records"), start=1):
        values = [v if isinstance(v, str) else "" for v in record.values()]
        if all(is_null_or_whitespace(v) for v in values):
            continue
        row_text = ",".join(values)
        try:
            charge = TollCharge(
                date=clean_date(record[cols.date], TOLL_DATE_FORMAT),
                amount=clean_amount(record[cols.amount], absolute=True),
                location=_text_or(record, cols.location, UNKNOWN_LOCATION),
                plate=_text_or(record, cols.plate, UNKNOWN_PLATE),
                row_index=row_no,
            )
        except (MalformedAmount, MalformedDate) as e:
            failure = RowParseFailure(row_text, str(e), row_no)
            log.warning("Toll row %d skipped: %s", row_no, e)
            result.failures.append(failure)
            continue
        result.charges.append(charge)
    log.info(
        "Loaded %d toll charges (%d failed rows)", len(result.charges), len(result.failures)
    )
    return result


def _text_or(record: dict, column: Optional[str], default: str) -> str:
    if column is None:
        return default
    value = record.get(column)
    if not isinstance(value, str) or is_null_or_whitespace(value):
        return default
    return value.strip()


def load_toll_csv(source: Union[str, Path, IO[str]]) -> TollLoadResult:
    """Load from a path or an open text stream."""
    if isinstance(source, (str, Path)):
        log.info("Loading toll CSV: %s", source)
        return parse_toll_csv(read_text(Path(source)))
    return parse_toll_csv(source.read())
