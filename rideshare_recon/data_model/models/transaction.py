# rideshare_recon/data_model/models/transaction.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Mapping, Optional
from uuid import UUID, uuid4

from ..interfaces import (
    ITransaction,
    RecursiveDictStr,
    TransactionCategory,
)


def _opt_dt(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return value if isinstance(value, datetime) else datetime.fromisoformat(str(value))


def _opt_dec(value: Any) -> Optional[Decimal]:
    if value in (None, ""):
        return None
    return Decimal(str(value))


def _opt_uuid(value: Any) -> Optional[UUID]:
    if value in (None, ""):
        return None
    return value if isinstance(value, UUID) else UUID(str(value))


@dataclass
class Transaction:
    """
    One platform statement row (earning, tip, promotion, transfer...).

    `source_batch` names the statement period it was imported from and is the
    unit of replace-on-reimport. `shift_id` is None while the row is an orphan.
    """

    # region Core Fields

    transaction_date: datetime
    event_type: str
    amount: Decimal
    source_batch: str = ""
    event_date: Optional[datetime] = None
    toll_reimbursement: Optional[Decimal] = None
    shift_id: Optional[UUID] = None
    needs_manual_verification: bool = False
    import_date: datetime = field(default_factory=datetime.now)
    source_row: str = ""
    id: UUID = field(default_factory=uuid4)

    # endregion Core Fields

    @property
    def category(self) -> TransactionCategory:
        return TransactionCategory.from_event_type(self.event_type)

    @property
    def match_date(self) -> datetime:
        """Timestamp used to place the row inside a shift window."""
        return self.event_date or self.transaction_date

    @property
    def is_orphan(self) -> bool:
        return self.shift_id is None

    # region IToDict

    def to_dict(self) -> dict[str, RecursiveDictStr]:
        return {
            "id": str(self.id),
            "transaction_date": self.transaction_date.isoformat(),
            "event_date": self.event_date.isoformat() if self.event_date else None,
            "event_type": self.event_type,
            "amount": str(self.amount),
            "toll_reimbursement": (
                str(self.toll_reimbursement)
                if self.toll_reimbursement is not None
                else None
            ),
            "source_batch": self.source_batch,
            "shift_id": str(self.shift_id) if self.shift_id else None,
            "needs_manual_verification": "true" if self.needs_manual_verification else "false",
            "import_date": self.import_date.isoformat(),
            "source_row": self.source_row,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Transaction":
        """Inverse of `to_dict`; missing optional keys take their defaults."""
        try:
            txn = cls(
                transaction_date=_opt_dt(d["transaction_date"]),  # type: ignore[arg-type]
                event_type=str(d["event_type"]),
                amount=Decimal(str(d["amount"])),
            )
        except KeyError as e:
            raise ValueError(f"Transaction record missing field {e.args[0]!r}") from None
        txn.source_batch = str(d.get("source_batch") or "")
        txn.event_date = _opt_dt(d.get("event_date"))
        txn.toll_reimbursement = _opt_dec(d.get("toll_reimbursement"))
        txn.shift_id = _opt_uuid(d.get("shift_id"))
        flag = d.get("needs_manual_verification", False)
        txn.needs_manual_verification = (
            flag.lower() == "true" if isinstance(flag, str) else bool(flag)
        )
        txn.import_date = _opt_dt(d.get("import_date")) or txn.import_date
        txn.source_row = str(d.get("source_row") or "")
        txn.id = _opt_uuid(d.get("id")) or txn.id
        return txn

    # endregion IToDict


if TYPE_CHECKING:
    _x: ITransaction = Transaction(datetime.now(), "UberX", Decimal(0))
