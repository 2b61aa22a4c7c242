# rideshare_recon/data_model/__init__.py
from .interfaces import (
    AttachmentType, ColumnLayout, TransactionCategory,
    IShift, IToDict, ITollSummaryRenderer, ITransaction, RecursiveDictStr)
from .models import (
    ImageAttachment, Shift, StatementPeriod, TextFragment, TollCharge,
    TollSummary, Transaction, TransactionTotals, totals)
__all__ = [
    "AttachmentType", "ColumnLayout", "TransactionCategory",
    "IShift", "IToDict", "ITollSummaryRenderer", "ITransaction",
    "RecursiveDictStr", "ImageAttachment", "Shift", "StatementPeriod",
    "TextFragment", "TollCharge", "TollSummary", "Transaction",
    "TransactionTotals", "totals"]
