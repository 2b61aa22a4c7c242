# rideshare_recon/data_model/models/text_fragment.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TextFragment:
    """
    A run of text extracted from a page.

    `x` grows to the right, `y` is measured from the top of the page.
    """

    text: str
    x: float
    y: float
