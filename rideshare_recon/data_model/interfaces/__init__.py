# rideshare_recon/data_model/interfaces/__init__.py
"""
Interfaces and Enums for the reconciliation data model.
"""

from .enum_attachment_type import AttachmentType
from .enum_column_layout import ColumnLayout
from .enum_transaction_category import TransactionCategory
from .i_shift import IShift
from .i_to_dict import IToDict, RecursiveDictStr
from .i_toll_summary_renderer import ITollSummaryRenderer
from .i_transaction import ITransaction

__all__ = [
    "AttachmentType",
    "ColumnLayout",
    "TransactionCategory",
    "IShift",
    "IToDict",
    "RecursiveDictStr",
    "ITollSummaryRenderer",
    "ITransaction",
]
