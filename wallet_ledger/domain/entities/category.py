"""Category and transaction-type entities."""

import datetime
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class TransactionKind(IntEnum):
    """
    Direction of money movement, keyed by the transaction_types table id.

    The ledger only handles CREDIT and DEBIT. TRANSFER needs paired
    double-entry postings and is rejected by the simple ledger.
    """

    CREDIT = 1  # Money in, increases the balance
    DEBIT = 2  # Money out, decreases the balance
    TRANSFER = 3

    @property
    def slug(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class TransactionTypeRef:
    """Row of the transaction_types lookup table."""

    id: int
    type_name: str
    type_slug: str

    @property
    def kind(self) -> Optional[TransactionKind]:
        try:
            return TransactionKind(self.id)
        except ValueError:
            return None


@dataclass
class Category:
    """
    A user-owned category. Its transaction type decides the sign of
    every transaction filed under it.

    Soft-deleted categories keep resolving so that existing transactions
    can still be reversed or edited.
    """

    user_id: int
    transaction_type_id: int
    category_name: str
    color: str
    id: Optional[int] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None
    deleted_at: Optional[datetime.datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class CategoryRef:
    """Category projection embedded in a TransactionDTO."""

    id: int
    category_name: str
    color: str
    transaction_type: Optional[TransactionTypeRef] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category_name": self.category_name,
            "color": self.color,
            "transaction_type": (
                {
                    "id": self.transaction_type.id,
                    "type_name": self.transaction_type.type_name,
                    "type_slug": self.transaction_type.type_slug,
                }
                if self.transaction_type
                else None
            ),
        }
