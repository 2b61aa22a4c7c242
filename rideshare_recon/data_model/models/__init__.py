# rideshare_recon/data_model/models/__init__.py

from .shift import ImageAttachment, Shift
from .statement_period import StatementPeriod
from .text_fragment import TextFragment
from .toll_charge import UNKNOWN_LOCATION, UNKNOWN_PLATE, TollCharge
from .toll_summary import TollSummary
from .transaction import Transaction
from .transaction_totals import TransactionTotals, totals

__all__ = [
    "ImageAttachment",
    "Shift",
    "StatementPeriod",
    "TextFragment",
    "TollCharge",
    "TollSummary",
    "Transaction",
    "TransactionTotals",
    "totals",
    "UNKNOWN_LOCATION",
    "UNKNOWN_PLATE",
]
