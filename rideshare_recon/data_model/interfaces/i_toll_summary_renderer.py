# rideshare_recon/data_model/interfaces/i_toll_summary_renderer.py
from __future__ import annotations

from typing import TYPE_CHECKING

from typing_extensions import Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..models.shift import ImageAttachment
    from ..models.toll_summary import TollSummary


@runtime_checkable
class ITollSummaryRenderer(Protocol):
    """
    Turns a toll summary into a stored artifact and hands back the attachment
    that references it. Image encoding and file storage live behind this.
    """

    def render(self, summary: "TollSummary") -> "ImageAttachment": ...
