# rideshare_recon/data_model/models/statement_period.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


def _label_date(d: datetime) -> str:
    return f"{d:%b} {d.day}, {d.year}"


@dataclass(frozen=True)
class StatementPeriod:
    """
    The 4 AM to 4 AM window a platform statement covers.

    `label` ("Oct 13, 2025 - Oct 20, 2025") is the statement's source batch.
    """

    start: datetime
    end: datetime

    @property
    def label(self) -> str:
        return f"{_label_date(self.start)} - {_label_date(self.end)}"

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def __str__(self) -> str:
        return self.label
