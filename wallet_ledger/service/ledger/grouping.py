"""
Grouping and period filtering.

Stateless projections over a snapshot of transaction DTOs: the
statement-by-month view and the list of months that hold data.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from wallet_ledger.domain.entities import (
    GroupedTransactions,
    MonthYear,
    TransactionDTO,
    TransactionGroup,
)
from wallet_ledger.domain.exceptions import FieldError, ValidationFailedException

from .statistics import calculate_totals, ensure_transaction_list

MIN_YEAR = 1900
MAX_YEAR = 9999


def parse_period(
    month: Optional[int],
    year: Optional[int],
) -> Tuple[Optional[int], Optional[int]]:
    """
    Validate an optional (month, year) filter.

    Both or neither must be given.

    Raises:
        ValidationFailedException: For a half filter or out-of-range values
    """
    if month is None and year is None:
        return None, None

    errors = []
    if month is None or year is None:
        errors.append(FieldError("month", "month and year must be given together"))
    else:
        if not 1 <= month <= 12:
            errors.append(FieldError("month", "must be between 1 and 12"))
        if not MIN_YEAR <= year <= MAX_YEAR:
            errors.append(FieldError("year", f"must be between {MIN_YEAR} and {MAX_YEAR}"))

    if errors:
        raise ValidationFailedException(errors)

    return month, year


def _newest_first(tx: TransactionDTO):
    return (tx.date, tx.id or 0)


def group_by_month(transactions: Sequence[TransactionDTO]) -> List[TransactionGroup]:
    """
    Partition transactions by calendar month.

    Groups are ordered most recent period first. Within a group the
    transactions run from the latest date to the earliest, ties broken
    by id descending.
    """
    buckets: Dict[Tuple[int, int], List[TransactionDTO]] = {}
    for tx in ensure_transaction_list(transactions):
        buckets.setdefault((tx.date.year, tx.date.month), []).append(tx)

    return [
        TransactionGroup(
            year=year,
            month=month,
            transactions=sorted(buckets[(year, month)], key=_newest_first, reverse=True),
        )
        for year, month in sorted(buckets, reverse=True)
    ]


def group_with_totals(transactions: Sequence[TransactionDTO]) -> GroupedTransactions:
    """Month groups plus the totals of every listed transaction."""
    return GroupedTransactions(
        groups=group_by_month(transactions),
        totals=calculate_totals(transactions),
    )


def available_months(transactions: Sequence[TransactionDTO]) -> List[MonthYear]:
    """
    Distinct (year, month, count) periods present in the transactions.

    Returns:
        Periods ordered most recent first
    """
    counts: Dict[Tuple[int, int], int] = {}
    for tx in ensure_transaction_list(transactions):
        key = (tx.date.year, tx.date.month)
        counts[key] = counts.get(key, 0) + 1

    return [
        MonthYear(year=year, month=month, count=counts[(year, month)])
        for year, month in sorted(counts, reverse=True)
    ]
