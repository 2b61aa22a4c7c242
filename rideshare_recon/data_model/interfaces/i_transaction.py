# rideshare_recon/data_model/interfaces/i_transaction.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from typing_extensions import Protocol, runtime_checkable

from .enum_transaction_category import TransactionCategory
from .i_to_dict import IToDict


@runtime_checkable
class ITransaction(IToDict, Protocol):
    """Structural shape of a platform statement transaction."""

    id: UUID
    transaction_date: datetime
    event_date: Optional[datetime]
    event_type: str
    amount: Decimal
    toll_reimbursement: Optional[Decimal]
    source_batch: str
    shift_id: Optional[UUID]
    needs_manual_verification: bool
    import_date: datetime

    @property
    def category(self) -> TransactionCategory: ...
    @property
    def match_date(self) -> datetime: ...
