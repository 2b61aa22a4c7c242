# rideshare_recon/controllers/statement_pdf_loader.py
"""
Statement PDF to positioned text fragments (pdfplumber).

pdfplumber yields single words; words on the same line that sit closer than
`phrase_gap` points are merged back into one fragment so a column cell such as
"Sat, Oct 19" or "Transferred To Bank" arrives as one piece. y is the word's
`top`, measured from the top of the page.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pdfplumber

from rideshare_recon.data_model.models import TextFragment
from rideshare_recon.utilities import configure_logging

from .statement_parser import StatementParser, StatementParseResult

configure_logging()
log = logging.getLogger(__name__)

PHRASE_GAP = 6.0
_X_TOL = 2
_Y_TOL = 1.0


def _lines(words: Sequence[Dict[str, Any]], y_tolerance: float) -> List[List[Dict[str, Any]]]:
    """Words whose top lies within `y_tolerance` of a line's first word share that line."""
    lines: List[List[Dict[str, Any]]] = []
    anchor = 0.0
    for w in sorted(words, key=lambda w: (float(w["top"]), float(w["x0"]))):
        top = float(w["top"])
        if lines and abs(top - anchor) < y_tolerance:
            lines[-1].append(w)
        else:
            lines.append([w])
            anchor = top
    return lines


def merge_words(
    words: Sequence[Dict[str, Any]],
    phrase_gap: float = PHRASE_GAP,
    y_tolerance: float = _Y_TOL,
) -> List[TextFragment]:
    """Merge pdfplumber word dicts (text, x0, x1, top) into phrase fragments."""
    fragments: List[TextFragment] = []
    for words_on_line in _lines(words, y_tolerance):
        line = sorted(words_on_line, key=lambda w: float(w["x0"]))
        text, x0, x1, top = "", 0.0, 0.0, 0.0
        for w in line:
            if text and float(w["x0"]) - x1 <= phrase_gap:
                text = f"{text} {w['text']}"
                x1 = float(w["x1"])
                continue
            if text:
                fragments.append(TextFragment(text, x0, top))
            text, x0, x1, top = str(w["text"]), float(w["x0"]), float(w["x1"]), float(w["top"])
        if text:
            fragments.append(TextFragment(text, x0, top))
    return fragments


def load_statement_pages(
    path: Union[str, Path], *, phrase_gap: float = PHRASE_GAP
) -> List[List[TextFragment]]:
    """One list of fragments per page."""
    log.info("Loading statement PDF: %s", path)
    pages: List[List[TextFragment]] = []
    with pdfplumber.open(str(path)) as pdf:
        for page in pdf.pages:
            words = page.extract_words(
                x_tolerance=_X_TOL,
                y_tolerance=_Y_TOL,
                use_text_flow=False,
                keep_blank_chars=False,
            ) or []
            pages.append(merge_words(words, phrase_gap))
    log.debug("Extracted %d pages from %s", len(pages), path)
    return pages


def statement_header_text(path: Union[str, Path], *, max_pages: int = 1) -> str:
    """Plain text of the first page(s), where the statement period is printed."""
    with pdfplumber.open(str(path)) as pdf:
        return "\n".join((page.extract_text() or "") for page in pdf.pages[:max_pages])


def parse_statement_pdf(
    path: Union[str, Path], parser: Optional[StatementParser] = None
) -> StatementParseResult:
    parser = parser or StatementParser()
    return parser.parse_pages(
        load_statement_pages(path), header_text=statement_header_text(path)
    )
