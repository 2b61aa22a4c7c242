# tests/data_model/test_transaction_model.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from rideshare_recon.data_model.interfaces import ITransaction, TransactionCategory
from rideshare_recon.data_model.models import Transaction


@pytest.mark.parametrize(
    "event_type,expected",
    [
        ("Tip", TransactionCategory.TIP),
        ("tip from rider", TransactionCategory.TIP),
        ("Quest Completed 10 trips", TransactionCategory.PROMOTION),
        ("QUEST bonus", TransactionCategory.PROMOTION),
        ("Incentive Surge", TransactionCategory.PROMOTION),
        ("Transferred to Bank Account ending in 1234", TransactionCategory.IGNORE),
        ("Instant pay: transferred to debit card", TransactionCategory.IGNORE),
        ("UberX Priority", TransactionCategory.NET_FARE),
        ("Promotion - $15.00 extra for completing 3 orders", TransactionCategory.NET_FARE),
        ("", TransactionCategory.NET_FARE),
    ],
)
def test_category_from_event_type(event_type, expected):
    """Positive: category follows the case-insensitive event type prefix rules."""
    assert TransactionCategory.from_event_type(event_type) is expected


def test_transaction_category_property_and_match_date():
    """Positive: category derives from event_type; match_date prefers event_date."""
    # Arrange
    posted = datetime(2025, 10, 19, 19, 49)
    happened = datetime(2025, 10, 19, 18, 45)
    txn = Transaction(transaction_date=posted, event_type="Tip", amount=Decimal("3.00"))
    # Act
    before = txn.match_date
    txn.event_date = happened
    # Assert
    assert txn.category is TransactionCategory.TIP
    assert before == posted
    assert txn.match_date == happened
    assert txn.is_orphan
    assert isinstance(txn, ITransaction)


def test_transaction_dict_snapshot_restores_every_field():
    """Positive: from_dict(to_dict()) gives back an equal transaction."""
    # Arrange
    txn = Transaction(
        transaction_date=datetime(2025, 10, 19, 19, 49),
        event_type="UberX Priority",
        amount=Decimal("21.55"),
        source_batch="Oct 13, 2025 - Oct 20, 2025",
        event_date=datetime(2025, 10, 19, 18, 45),
        toll_reimbursement=Decimal("2.71"),
        shift_id=uuid4(),
        needs_manual_verification=True,
        source_row="Oct 19 7:49 PM UberX",
    )
    # Act
    restored = Transaction.from_dict(txn.to_dict())
    # Assert
    assert restored == txn


def test_transaction_from_dict_missing_required_field():
    """Negative: a record without an amount is rejected with ValueError."""
    with pytest.raises(ValueError, match="amount"):
        Transaction.from_dict({"transaction_date": "2025-10-19T19:49:00", "event_type": "Tip"})
