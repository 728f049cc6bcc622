"""Account (wallet) entity."""

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class Account:
    """
    A wallet owned by a single user.

    Attributes:
        token: Stable external identifier used by clients and transactions
        user_id: Owner of the account
        account_name: Display name
        balance: Current running total, the single source of truth for
            what the user has now. Only the ledger writes it.
        version: Incremented on every balance write; used for
            compare-and-write concurrency control
    """

    token: str
    user_id: int
    account_name: str
    balance: Decimal
    id: Optional[int] = None
    version: int = 0
    created_at: Optional[datetime.datetime] = None

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == user_id
