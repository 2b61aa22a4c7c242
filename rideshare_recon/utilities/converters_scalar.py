# rideshare_recon/utilities/converters_scalar.py
"""
Amount/date normalizer.

Pure functions that turn loosely formatted currency and date text (templated
spreadsheet formulas, currency symbols, display-only sign markers, short
statement dates without a year) into Decimal / datetime values.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Final, Optional, Tuple

from pyparsing import (
    CaselessKeyword,
    Literal,
    ParseException,
    QuotedString,
    Regex,
    Suppress,
)
from pyparsing import Optional as Opt

from .errors import MalformedAmount, MalformedDate

# region Templated formula

# =Text("09/16/2025 18:20:33","mm/dd/yyyy HH:mm:SS")
_FORMULA = (
    Suppress(Opt(Literal("=")))
    + Suppress(CaselessKeyword("TEXT"))
    + Suppress("(")
    + QuotedString('"', esc_quote='""')("value")
    + Suppress(",")
    + Regex(r"[^)]*")("fmt")
    + Suppress(")")
)


def split_formula(text: str) -> Tuple[str, Optional[str]]:
    """
    Split a templated-formula cell into (value, format).

    Text that is not a formula is returned stripped, with a format of None.
    """
    s = (text or "").strip()
    if "(" not in s:
        return s, None
    try:
        parsed = _FORMULA.parse_string(s, parse_all=True)
    except ParseException:
        return s, None
    fmt = parsed["fmt"].strip().strip('"').strip()
    return parsed["value"].strip(), fmt or None


def unwrap_formula(text: str) -> str:
    """Return the inner value of `=Text("value","fmt")`, or the text itself."""
    return split_formula(text)[0]


# endregion Templated formula

# region Amounts


def clean_number_like_string(value: str, decimal_char: str = "") -> str:
    s = value.strip()
    if not s:
        raise ValueError("Empty string cannot be converted to Decimal")

    # Normalize common oddities
    s = s.replace("\xa0", " ").replace(_UNICODE_MINUS, "-")  # NBSP, unicode minus
    s = s.strip()

    # Detect negative via parentheses or trailing minus
    neg = False
    if s.startswith("(") and s.endswith(")"):
        neg = True
        s = s[1:-1].strip()
    if s.endswith("-"):
        neg = not neg
        s = s[:-1].strip()

    # Remove currency symbols/letters and anything not in [digits , . -]
    s = _NON_DIGIT_KEEP_SEP.sub("", s)

    if s.startswith("+"):
        s = s[1:]
    if s.startswith("-"):
        neg = not neg
        s = s[1:]

    digits = re.sub(r"[^\d]", "", s)
    if not digits:
        raise ValueError(f"No digits found in input: {value!r}")

    if decimal_char == ".":
        cleaned = s.replace(",", "")
    elif decimal_char == ",":
        cleaned = s.replace(".", "").replace(",", ".")
    elif decimal_char == "":
        cleaned = s.replace(",", "")
    else:
        raise ValueError(f"Invalid decimal_char: {decimal_char!r}")

    cleaned = cleaned.strip()
    if neg and cleaned and cleaned[0] != "-":
        cleaned = "-" + cleaned
    return cleaned


def clean_amount(value: Any, *, absolute: bool = False) -> Decimal:
    """
    Convert a currency cell into a Decimal.

    Accepts plain numbers, "$21.55", "-$1.30", "(1,234.56)", "+$2.00" and the
    templated formula form ``=Text("-$99.00000000001","currency")``. Digits
    after the decimal point are kept exactly, however many there are.

    Parameters
    ----------
    value : Any
        Text (or an int/float/Decimal) to convert.
    absolute : bool
        Drop the sign. Toll authorities print charges as negative numbers
        purely for display.

    Raises
    ------
    MalformedAmount
        If no numeral can be recovered.
    """
    if isinstance(value, bool):
        raise MalformedAmount(f"Unsupported type for amount: {type(value).__name__}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # Avoid binary float artifacts
        result = Decimal(str(value))
    elif isinstance(value, str):
        inner = unwrap_formula(value)
        try:
            cleaned = clean_number_like_string(inner, ".")
            result = Decimal(cleaned)
        except (ValueError, InvalidOperation) as e:
            raise MalformedAmount(f"Could not parse amount from {value!r}") from e
    else:
        raise MalformedAmount(f"Unsupported type for amount: {type(value).__name__}")

    if not result.is_finite():
        raise MalformedAmount(f"Amount is not finite: {value!r}")
    return abs(result) if absolute else result


def figures_in(text: str) -> list[Decimal]:
    """Every dollar figure in `text`, left to right ("-$473.61-$473.61" gives two)."""
    return [clean_amount(m.group(0)) for m in _FIGURE_RE.finditer(text)]


# endregion Amounts

# region Dates


def clean_date(value: Any, format_hint: Optional[str] = None) -> datetime:
    """
    Parse a date/time cell into a naive datetime.

    The templated formula wrapper is removed first. `format_hint` is a
    strptime pattern tried before the built-in list of known formats.

    Raises
    ------
    MalformedDate
        If no format matches.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if not isinstance(value, str):
        raise MalformedDate(f"Unsupported type for date: {type(value).__name__}")

    txt = " ".join(unwrap_formula(value).split())
    if not txt:
        raise MalformedDate("Empty date")

    patterns = ((format_hint,) if format_hint else ()) + _DATE_FORMATS
    for fmt in patterns:
        try:
            return datetime.strptime(txt, fmt)
        except ValueError:
            continue
    raise MalformedDate(f"Unrecognized date format: {value!r}")


def month_number(name: str) -> int:
    try:
        return _MONTHS[name.strip().rstrip(".")[:3].lower()]
    except KeyError:
        raise MalformedDate(f"Unknown month: {name!r}") from None


def parse_month_day(text: str) -> Tuple[int, int]:
    """'Sat, Oct 19' / 'Oct 19' -> (10, 19)."""
    m = MONTH_DAY_RE.match(text.strip())
    if not m:
        raise MalformedDate(f"Not a month/day: {text!r}")
    return month_number(m.group("month")), int(m.group("day"))


def parse_clock(text: str) -> time:
    """'7:49 PM' -> time(19, 49)."""
    m = CLOCK_RE.match(text.strip())
    if not m:
        raise MalformedDate(f"Not a clock time: {text!r}")
    hour, minute = int(m.group("hour")), int(m.group("minute"))
    if not (1 <= hour <= 12) or minute > 59:
        raise MalformedDate(f"Clock time out of range: {text!r}")
    pm = m.group("ampm").upper() == "PM"
    if pm and hour != 12:
        hour += 12
    elif not pm and hour == 12:
        hour = 0
    return time(hour, minute)


def infer_year(month: int, day: int, anchor_end: date) -> date:
    """
    Resolve a year-less month/day against the statement's end date.

    The year is the anchor's year, except when the month is numerically
    greater than the anchor's month: a December row in a statement ending in
    January belongs to the previous year.
    """
    year = anchor_end.year - 1 if month > anchor_end.month else anchor_end.year
    try:
        return date(year, month, day)
    except ValueError as e:
        raise MalformedDate(f"Invalid day {month}/{day} for year {year}") from e


def statement_datetime(date_text: str, time_text: str, anchor_end: date) -> datetime:
    """Combine 'Sat, Oct 19' + '7:49 PM' into a datetime using `infer_year`."""
    month, day = parse_month_day(date_text)
    return datetime.combine(infer_year(month, day, anchor_end), parse_clock(time_text))


def stamp_datetime(text: str, anchor_end: date) -> datetime:
    """Parse a one-fragment stamp such as 'Oct 19 6:45 PM'."""
    m = STAMP_RE.match(text.strip())
    if not m:
        raise MalformedDate(f"Not a date/time stamp: {text!r}")
    return statement_datetime(m.group("md"), m.group("clock"), anchor_end)


# endregion Dates

_UNICODE_MINUS = "−"
_NON_DIGIT_KEEP_SEP: Final[re.Pattern[str]] = re.compile(r"[^\d,.\-]+")
_FIGURE_RE: Final[re.Pattern[str]] = re.compile(r"[-+]?\$\d[\d,]*(?:\.\d+)?")
_MONTHS: Final[dict[str, int]] = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_DATE_FORMATS: Final[Tuple[str, ...]] = (
    "%m/%d/%Y %H:%M:%S",  # 09/16/2025 18:20:33 (toll authority export)
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y-%m-%d",
    "%b %d, %Y",
)

MONTH_NAME = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?"
    r"|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
WEEKDAY_PREFIX = r"(?:(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun|T\s+ue),\s+)"

MONTH_DAY_RE: Final[re.Pattern[str]] = re.compile(
    rf"^{WEEKDAY_PREFIX}?(?P<month>{MONTH_NAME})\.?\s+(?P<day>\d{{1,2}})$"
)
CLOCK_RE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<hour>\d{1,2}):(?P<minute>\d{2})\s*(?P<ampm>[AaPp][Mm])$"
)
STAMP_RE: Final[re.Pattern[str]] = re.compile(
    rf"^(?P<md>{MONTH_NAME}\.?\s+\d{{1,2}})\s+(?P<clock>\d{{1,2}}:\d{{2}}\s*[AaPp][Mm])$"
)
FIGURES_ONLY_RE: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?:[-+]?\$\d[\d,]*(?:\.\d+)?\s*)+$"
)
# "Transferred To Bank -$473.61" -> ("Transferred To Bank", "-$473.61")
TRAILING_FIGURES_RE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<text>.*?)\s*(?P<figures>(?:[-+]?\$\d[\d,]*(?:\.\d+)?\s*)*)$"
)
