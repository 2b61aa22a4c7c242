# rideshare_recon/data_model/models/transaction_totals.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from ..interfaces import ITransaction, TransactionCategory

_ZERO = Decimal("0")


@dataclass(frozen=True)
class TransactionTotals:
    tips: Decimal = _ZERO
    tolls_reimbursed: Decimal = _ZERO
    promotions: Decimal = _ZERO
    net_fare: Decimal = _ZERO
    count: int = 0

    @property
    def total_earnings(self) -> Decimal:
        """Tips, promotions and fares; toll reimbursements are pass-through."""
        return self.tips + self.promotions + self.net_fare


def totals(
    transactions: Iterable[ITransaction],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> TransactionTotals:
    """
    Sum transactions into per-category buckets.

    When given, the range is half-open on `transaction_date`:
    ``start <= transaction_date < end``. Every transaction in range is
    counted; Ignore rows (bank transfers) add nothing to any bucket.
    """
    tips = tolls = promotions = net_fare = _ZERO
    count = 0
    for txn in transactions:
        if start is not None and txn.transaction_date < start:
            continue
        if end is not None and txn.transaction_date >= end:
            continue
        count += 1
        category = txn.category
        if category is TransactionCategory.IGNORE:
            continue
        if category is TransactionCategory.TIP:
            tips += txn.amount
        elif category is TransactionCategory.PROMOTION:
            promotions += txn.amount
        else:
            net_fare += txn.amount
        if txn.toll_reimbursement is not None:
            tolls += txn.toll_reimbursement
    return TransactionTotals(
        tips=tips,
        tolls_reimbursed=tolls,
        promotions=promotions,
        net_fare=net_fare,
        count=count,
    )
