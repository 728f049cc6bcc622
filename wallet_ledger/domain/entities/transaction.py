"""Ledger transaction entities."""

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .category import CategoryRef, TransactionKind


@dataclass
class Transaction:
    """
    A single ledger entry as stored.

    Attributes:
        account_token: Owning account, never changes after creation
        category_id: Category deciding the direction of the amount
        amount: Positive magnitude; the sign comes from the category type
        description: Free text
        date: Calendar date of the movement
        balance: Account balance immediately after this entry was written.
            A point-in-time snapshot, not recomputed when other rows change.
    """

    account_token: str
    category_id: int
    amount: Decimal
    description: str
    date: datetime.date
    balance: Decimal = Decimal("0.00")
    id: Optional[int] = None
    created_at: Optional[datetime.datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "account_token": self.account_token,
            "category_id": self.category_id,
            "amount": float(self.amount),
            "description": self.description,
            "date": self.date.isoformat(),
            "balance": float(self.balance),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class TransactionDTO:
    """Read-only projection of a transaction joined with its category and type."""

    id: int
    account_token: str
    amount: Decimal
    description: str
    date: datetime.date
    balance: Decimal
    created_at: Optional[datetime.datetime] = None
    category: Optional[CategoryRef] = None

    @property
    def kind(self) -> Optional[TransactionKind]:
        """Transaction kind, or None when category info is missing."""
        if self.category is None or self.category.transaction_type is None:
            return None
        return self.category.transaction_type.kind

    @property
    def is_credit(self) -> bool:
        return self.kind is TransactionKind.CREDIT

    @property
    def is_debit(self) -> bool:
        return self.kind is TransactionKind.DEBIT
