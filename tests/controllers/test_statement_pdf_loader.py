# tests/controllers/test_statement_pdf_loader.py
from __future__ import annotations

from decimal import Decimal

# System under test
import rideshare_recon.controllers.statement_pdf_loader as pl


def _word(text: str, x0: float, top: float, width: float | None = None) -> dict:
    w = width if width is not None else 5.0 * len(text)
    return {"text": text, "x0": x0, "x1": x0 + w, "top": top}


class _FakePage:
    def __init__(self, words, text=""):
        self._words = words
        self._text = text

    def extract_words(self, **kwargs):
        return self._words

    def extract_text(self):
        return self._text


class _FakePdf:
    def __init__(self, pages):
        self.pages = pages

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def test_merge_words_joins_close_words_and_splits_columns():
    """Positive: words closer than the phrase gap merge; column gaps start a new fragment."""
    # Arrange
    words = [
        _word("Oct", 50.0, 100.2, 15.0),
        _word("Sat,", 30.0, 100.0, 16.0),
        _word("19", 68.0, 100.1, 10.0),
        _word("$21.55", 400.0, 100.0),
        _word("next", 30.0, 120.0),
    ]
    # Act
    frags = pl.merge_words(words)
    # Assert
    assert [f.text for f in frags] == ["Sat, Oct 19", "$21.55", "next"]
    assert frags[0].x == 30.0
    assert frags[0].y == 100.0


def test_parse_statement_pdf_end_to_end(monkeypatch):
    """Positive: PDF words flow through the parser into transactions."""
    # Arrange
    period = "Statement period: Oct 13, 2025 4 AM - Oct 20, 2025 4 AM"
    words = [
        _word("Processed", 36.0, 100.0),
        _word("Event", 140.0, 100.0),
        _word("Amount", 400.0, 100.0),
        _word("Payout", 520.0, 100.0),
        _word("Balance", 580.0, 100.0),
        _word("Sat,", 36.0, 120.0, 16.0),
        _word("Oct", 55.0, 120.0, 15.0),
        _word("19", 73.0, 120.0, 10.0),
        _word("7:49", 140.0, 120.0, 18.0),
        _word("PM", 161.0, 120.0, 12.0),
        _word("Tip", 220.0, 120.0),
        _word("$4.00", 400.0, 120.0),
        _word("$0.00", 520.0, 120.0),
        _word("$104.00", 580.0, 120.0),
    ]
    opened = []

    def fake_open(path):
        opened.append(path)
        return _FakePdf([_FakePage(words, text=period)])

    monkeypatch.setattr(pl.pdfplumber, "open", fake_open)
    # Act
    result = pl.parse_statement_pdf("statement.pdf")
    # Assert
    assert opened == ["statement.pdf", "statement.pdf"]
    (txn,) = result.transactions
    assert txn.event_type == "Tip"
    assert txn.amount == Decimal("4.00")
    assert result.source_batch == "Oct 13, 2025 - Oct 20, 2025"


def test_empty_pdf_gives_empty_result(monkeypatch):
    """Negative: a PDF with no words imports nothing."""
    monkeypatch.setattr(pl.pdfplumber, "open", lambda path: _FakePdf([_FakePage([])]))
    assert pl.parse_statement_pdf("blank.pdf").is_empty


def test_merge_words_clusters_tops_within_tolerance():
    """Positive: tops on either side of a rounding boundary still form one cell."""
    # Arrange
    words = [
        _word("Sat,", 36.0, 120.4, 16.0),
        _word("Oct", 55.0, 120.6, 15.0),
        _word("19", 73.0, 120.6, 10.0),
        _word("$8.00", 400.0, 120.5),
    ]
    # Act
    frags = pl.merge_words(words)
    # Assert
    assert [f.text for f in frags] == ["Sat, Oct 19", "$8.00"]
    assert frags[0].y == 120.4
