"""Data transfer objects for ledger operations."""

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from wallet_ledger.domain.entities import MonthYear, TransactionDTO
from wallet_ledger.domain.exceptions import FieldError
from wallet_ledger.service.ledger.money import has_at_most_cents
from wallet_ledger.service.ledger.settings import LedgerSettings, ledger_settings


def _validate_fields(
    amount: Decimal,
    description: str,
    date: datetime.date,
    settings: LedgerSettings,
) -> List[FieldError]:
    errors = []

    if amount is None or not amount.is_finite() or amount <= 0:
        errors.append(FieldError("amount", "must be a positive number"))
    elif not has_at_most_cents(amount):
        errors.append(FieldError("amount", "must have at most two decimal places"))
    elif amount > Decimal(str(settings.max_amount)):
        errors.append(FieldError("amount", "exceeds the maximum transaction amount"))

    if description is None:
        errors.append(FieldError("description", "is required"))
    elif len(description) > settings.max_description_length:
        errors.append(
            FieldError(
                "description",
                f"must be at most {settings.max_description_length} characters",
            )
        )

    if not isinstance(date, datetime.date) or isinstance(date, datetime.datetime):
        errors.append(FieldError("date", "must be a calendar date"))

    return errors


@dataclass(frozen=True)
class CreateTransactionRequest:
    """Input data for recording a new transaction."""

    account_token: str
    category_id: int
    amount: Decimal
    description: str
    date: datetime.date

    def validate(self, settings: LedgerSettings = ledger_settings) -> List[FieldError]:
        errors = []

        if not self.account_token or not self.account_token.strip():
            errors.append(FieldError("account_token", "is required"))

        if not self.category_id or self.category_id <= 0:
            errors.append(FieldError("category_id", "must be a positive id"))

        errors.extend(_validate_fields(self.amount, self.description, self.date, settings))
        return errors


@dataclass(frozen=True)
class UpdateTransactionRequest:
    """Input data for editing an existing transaction."""

    transaction_id: int
    amount: Decimal
    category_id: int
    description: str
    date: datetime.date

    def validate(self, settings: LedgerSettings = ledger_settings) -> List[FieldError]:
        errors = []

        if not self.transaction_id or self.transaction_id <= 0:
            errors.append(FieldError("transaction_id", "must be a positive id"))

        if not self.category_id or self.category_id <= 0:
            errors.append(FieldError("category_id", "must be a positive id"))

        errors.extend(_validate_fields(self.amount, self.description, self.date, settings))
        return errors


@dataclass(frozen=True)
class TransactionChange:
    """
    Result of a ledger mutation, bundled for clients that refresh their
    view in one round trip.

    For a delete, `transaction` is the removed row with its balance set
    to the account balance after removal.
    """

    transaction: TransactionDTO
    account_balance: Decimal
    months: List[MonthYear]
