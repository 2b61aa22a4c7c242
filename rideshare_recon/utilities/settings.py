# rideshare_recon/utilities/settings.py
"""
Tunables shared by the parsers and matchers.

Components take each of these as a keyword argument and fall back to the
values here.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Final

# Fragments whose vertical coordinates differ by less than this belong to the
# same visual row (PDF points).
ROW_Y_TOLERANCE: Final[float] = 5.0

# Window used for a shift that has no end date yet.
OPEN_SHIFT_WINDOW: Final[timedelta] = timedelta(hours=12)

# Statement periods run from 4 AM to 4 AM.
STATEMENT_PERIOD_HOUR: Final[int] = 4

# Description prefix of generated toll summaries (also used to recognize
# summaries stored under the generic receipt type by older versions).
TOLL_SUMMARY_MARKER: Final[str] = "Toll Summary"

# Persisted flag guarding the one-time toll attachment migration.
TOLL_MIGRATION_FLAG: Final[str] = "migrated_toll_summary_attachments"

# Amount tolerance used by duplicate detection.
DUPLICATE_AMOUNT_TOLERANCE: Final[str] = "0.01"

# Environment variable overriding the log directory.
LOG_DIR_ENV: Final[str] = "RIDESHARE_RECON_LOG_DIR"
