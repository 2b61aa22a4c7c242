# rideshare_recon/controllers/__init__.py
from .attachments import commit_removals, migrate_legacy_toll_attachments
from .reconciliation import ReconciliationEngine, StatementImportReport
from .shift_matcher import ShiftMatcher
from .statement_parser import (
    StatementParser,
    StatementParseResult,
    detect_layout,
    group_rows,
    parse_statement_period,
    split_text_line,
)
from .toll_loader import TollLoadResult, load_toll_csv, parse_toll_csv
from .toll_matcher import TollImportReport, TollMatcher
from .toll_summary_renderer import DirectoryTollSummaryRenderer, InMemoryTollSummaryRenderer
from .transaction_store import TransactionStore

__all__ = [
    "commit_removals",
    "migrate_legacy_toll_attachments",
    "ReconciliationEngine",
    "StatementImportReport",
    "ShiftMatcher",
    "StatementParser",
    "StatementParseResult",
    "detect_layout",
    "group_rows",
    "parse_statement_period",
    "split_text_line",
    "TollLoadResult",
    "load_toll_csv",
    "parse_toll_csv",
    "TollImportReport",
    "TollMatcher",
    "DirectoryTollSummaryRenderer",
    "InMemoryTollSummaryRenderer",
    "TransactionStore",
]
