"""
Category Classifier.

Maps a category to the kind of movement it represents and turns the
stored positive amount into a signed one:

    Credit   -> +amount  (money in)
    Debit    -> -amount  (money out)
    Transfer -> rejected, needs paired double-entry logic
"""

from decimal import Decimal

from wallet_ledger.domain.entities import Category, TransactionKind
from wallet_ledger.domain.exceptions import (
    UnsupportedOperationException,
    ValidationFailedException,
)

from .money import Number, to_decimal


def classify(category: Category) -> TransactionKind:
    """
    Return the transaction kind of a category.

    Raises:
        ValidationFailedException: If the category points at an unknown type id
    """
    try:
        return TransactionKind(category.transaction_type_id)
    except ValueError:
        raise ValidationFailedException.single(
            "category_id",
            f"unknown transaction type {category.transaction_type_id}",
        )


def ensure_ledger_kind(category: Category) -> TransactionKind:
    """
    Classify a category and reject Transfer categories.

    Raises:
        UnsupportedOperationException: For Transfer categories
    """
    kind = classify(category)
    if kind is TransactionKind.TRANSFER:
        raise UnsupportedOperationException(
            "Transfers are not allowed here, they need a paired transaction"
        )
    return kind


def signed_amount(amount: Number, kind: TransactionKind) -> Decimal:
    """
    Apply the direction of kind to a positive magnitude.

    Args:
        amount: Stored positive amount
        kind: Transaction kind of the category

    Returns:
        +amount for credits, -amount for debits
    """
    value = abs(to_decimal(amount))
    if kind is TransactionKind.CREDIT:
        return value
    if kind is TransactionKind.DEBIT:
        return -value
    raise UnsupportedOperationException()
