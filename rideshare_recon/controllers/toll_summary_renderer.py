# rideshare_recon/controllers/toll_summary_renderer.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict

from rideshare_recon.data_model.interfaces import AttachmentType, ITollSummaryRenderer
from rideshare_recon.data_model.models import ImageAttachment, TollSummary
from rideshare_recon.utilities import configure_logging

configure_logging()
log = logging.getLogger(__name__)


def summary_filename(summary: TollSummary) -> str:
    return f"toll_summary_{summary.shift_id}_{summary.shift_start:%Y%m%d_%H%M}.txt"


def _attachment_for(summary: TollSummary, filename: str) -> ImageAttachment:
    return ImageAttachment(
        filename=filename,
        type=AttachmentType.IMPORTED_TOLL,
        description=summary.description,
    )


class InMemoryTollSummaryRenderer:
    """Keeps rendered documents in a dict keyed by attachment filename."""

    def __init__(self) -> None:
        self.documents: Dict[str, str] = {}

    def render(self, summary: TollSummary) -> ImageAttachment:
        filename = summary_filename(summary)
        self.documents[filename] = summary.to_text()
        return _attachment_for(summary, filename)


class DirectoryTollSummaryRenderer:
    """Writes each summary as a text document into `directory`."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def render(self, summary: TollSummary) -> ImageAttachment:
        self.directory.mkdir(parents=True, exist_ok=True)
        filename = summary_filename(summary)
        path = self.directory / filename
        path.write_text(summary.to_text(), encoding="utf-8")
        log.debug("Wrote toll summary %s", path)
        return _attachment_for(summary, filename)


if TYPE_CHECKING:
    _mem: ITollSummaryRenderer = InMemoryTollSummaryRenderer()
    _dir: ITollSummaryRenderer = DirectoryTollSummaryRenderer("summaries")
