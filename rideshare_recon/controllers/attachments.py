# rideshare_recon/controllers/attachments.py
from __future__ import annotations

import logging
from typing import Iterable, List
from uuid import UUID

from rideshare_recon.data_model.interfaces import AttachmentType, IShift
from rideshare_recon.data_model.models import ImageAttachment
from rideshare_recon.utilities import configure_logging
from rideshare_recon.utilities.flags import IFlagStore
from rideshare_recon.utilities.settings import TOLL_MIGRATION_FLAG, TOLL_SUMMARY_MARKER

configure_logging()
log = logging.getLogger(__name__)


def commit_removals(shift: IShift, pending_ids: Iterable[UUID]) -> List[ImageAttachment]:
    """
    Apply the removals a user marked on `shift`.

    Only attachments whose id is in `pending_ids` go; unknown ids are
    ignored. The removed attachments are returned so the caller can delete
    their files.
    """
    pending = set(pending_ids)
    if not pending:
        return []
    removed = [a for a in shift.image_attachments if a.id in pending]
    shift.image_attachments = [a for a in shift.image_attachments if a.id not in pending]
    if removed:
        log.info("Removed %d attachments from shift %s", len(removed), shift.id)
    return removed


def is_legacy_toll_summary(
    attachment: ImageAttachment, marker: str = TOLL_SUMMARY_MARKER
) -> bool:
    """A toll summary stored under the receipt type by older versions."""
    return attachment.type is AttachmentType.RECEIPT and (attachment.description or "").startswith(
        marker
    )


def migrate_legacy_toll_attachments(
    shifts: Iterable[IShift],
    flags: IFlagStore,
    *,
    marker: str = TOLL_SUMMARY_MARKER,
    flag_name: str = TOLL_MIGRATION_FLAG,
) -> int:
    """
    Retype legacy toll summaries as imported toll summaries, once.

    Returns the number converted; 0 when the migration already ran.
    """
    if flags.get_flag(flag_name):
        log.debug("Toll attachment migration already done")
        return 0
    converted = 0
    for shift in shifts:
        for attachment in shift.image_attachments:
            if is_legacy_toll_summary(attachment, marker):
                attachment.type = AttachmentType.IMPORTED_TOLL
                converted += 1
    flags.set_flag(flag_name, True)
    log.info("Migrated %d legacy toll summary attachments", converted)
    return converted
