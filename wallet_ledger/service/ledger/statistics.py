"""
Statistics Aggregator.

Pure functions that turn an already-fetched list of TransactionDTOs into
the statistics view: totals, largest amounts, per-category breakdowns
and per-day net totals. Nothing here performs I/O or mutates its input,
so the same list always produces the same result.

All monetary outputs are rounded to cents, half away from zero.
"""

import calendar
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from wallet_ledger.domain.entities import (
    CategoryStatistic,
    DailyTotal,
    TransactionDTO,
    TransactionKind,
    TransactionStatistics,
    TransactionTotals,
)
from wallet_ledger.domain.exceptions import FieldError, ValidationFailedException

from .money import ZERO, round_money
from .settings import LedgerSettings, ledger_settings

HUNDRED = Decimal("100")


def ensure_transaction_list(transactions: Optional[Sequence[TransactionDTO]]) -> List[TransactionDTO]:
    """
    Check that the input is a list of TransactionDTOs.

    Raises:
        ValidationFailedException: For None or foreign elements
    """
    if transactions is None:
        raise ValidationFailedException.single("transactions", "transactions cannot be None")

    errors = [
        FieldError(field=f"transactions[{index}]", reason="not a transaction")
        for index, item in enumerate(transactions)
        if not isinstance(item, TransactionDTO)
    ]
    if errors:
        raise ValidationFailedException(errors)

    return list(transactions)


def calculate_totals(transactions: Sequence[TransactionDTO]) -> TransactionTotals:
    """
    Sum credits and debits.

    Transactions without category or type information are skipped.

    Returns:
        TransactionTotals with difference = credit - debit
    """
    transactions = ensure_transaction_list(transactions)

    credit = ZERO
    debit = ZERO
    for tx in transactions:
        kind = tx.kind
        if kind is TransactionKind.CREDIT:
            credit += tx.amount
        elif kind is TransactionKind.DEBIT:
            debit += tx.amount

    credit = round_money(credit)
    debit = round_money(debit)
    return TransactionTotals(
        credit=credit,
        debit=debit,
        difference=round_money(credit - debit),
    )


def calculate_largest_amounts(transactions: Sequence[TransactionDTO]) -> Tuple[Decimal, Decimal]:
    """
    Find the largest single credit and debit.

    Returns:
        (largest_credit, largest_debit) as magnitudes, 0 when there are none
    """
    largest_credit = ZERO
    largest_debit = ZERO

    for tx in ensure_transaction_list(transactions):
        magnitude = abs(tx.amount)
        if tx.is_credit and magnitude > largest_credit:
            largest_credit = magnitude
        elif tx.is_debit and magnitude > largest_debit:
            largest_debit = magnitude

    return round_money(largest_credit), round_money(largest_debit)


def calculate_daily_totals(transactions: Sequence[TransactionDTO]) -> List[DailyTotal]:
    """
    Net signed total per calendar day.

    Credits count positive and debits negative. Only days with at least
    one typed transaction are listed, oldest first.
    """
    daily: Dict[str, Decimal] = {}

    for tx in ensure_transaction_list(transactions):
        if tx.is_credit:
            delta = abs(tx.amount)
        elif tx.is_debit:
            delta = -abs(tx.amount)
        else:
            continue
        day = tx.date.isoformat()
        daily[day] = daily.get(day, ZERO) + delta

    return [
        DailyTotal(date=day, total=round_money(total))
        for day, total in sorted(daily.items())
    ]


def build_category_breakdown(
    transactions: Sequence[TransactionDTO],
    kind: TransactionKind,
    type_total: Decimal,
    settings: LedgerSettings = ledger_settings,
) -> List[CategoryStatistic]:
    """
    Group the transactions of one kind by category name.

    Categories without a name land in the unknown bucket with a neutral
    color. Percentages are relative to type_total (0 when it is 0).

    Args:
        transactions: DTOs of any kind; only those of `kind` are used
        kind: CREDIT or DEBIT
        type_total: Total of that kind, as reported in the totals

    Returns:
        Category statistics sorted by total, largest first. Equal totals
        keep first-seen order.
    """
    buckets: Dict[str, List] = {}

    for tx in ensure_transaction_list(transactions):
        if tx.kind is not kind:
            continue

        name = tx.category.category_name or settings.unknown_category_name
        color = tx.category.color or settings.unknown_category_color

        bucket = buckets.setdefault(name, [0, ZERO, color])
        bucket[0] += 1
        bucket[1] += abs(tx.amount)

    breakdown = []
    for name, (count, total, color) in buckets.items():
        percentage = ZERO
        if type_total > 0:
            percentage = round_money(total / type_total * HUNDRED)
        breakdown.append(
            CategoryStatistic(
                name=name,
                count=count,
                total=round_money(total),
                percentage=percentage,
                color=color,
            )
        )

    return sorted(breakdown, key=lambda stat: stat.total, reverse=True)


def month_date_range(month: int, year: int) -> Tuple[str, str]:
    """First and last calendar day of a month, as YYYY-MM-DD strings."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last_day).isoformat()


def compute_statistics(
    transactions: Sequence[TransactionDTO],
    month: Optional[int] = None,
    year: Optional[int] = None,
    today: Optional[date] = None,
    settings: LedgerSettings = ledger_settings,
) -> TransactionStatistics:
    """
    Build the full statistics view for one account and period.

    Date range:
        - month and year given: that calendar month
        - otherwise, with data: earliest day with data up to today
        - otherwise: both empty

    Args:
        transactions: DTOs already filtered to the period
        month: Month of the period filter, if any
        year: Year of the period filter, if any
        today: Reference date for open-ended ranges (defaults to date.today())
        settings: Ledger settings

    Returns:
        TransactionStatistics
    """
    transactions = ensure_transaction_list(transactions)
    totals = calculate_totals(transactions)
    largest_credit, largest_debit = calculate_largest_amounts(transactions)
    daily_totals = calculate_daily_totals(transactions)

    if month is not None and year is not None:
        start_date, end_date = month_date_range(month, year)
    elif daily_totals:
        start_date = min(d.date for d in daily_totals)
        end_date = (today or date.today()).isoformat()
    else:
        start_date, end_date = "", ""

    return TransactionStatistics(
        total_transactions=len(transactions),
        largest_credit=largest_credit,
        largest_debit=largest_debit,
        totals=totals,
        credit_category_breakdown=build_category_breakdown(
            transactions, TransactionKind.CREDIT, totals.credit, settings
        ),
        debit_category_breakdown=build_category_breakdown(
            transactions, TransactionKind.DEBIT, totals.debit, settings
        ),
        daily_totals=daily_totals,
        start_date=start_date,
        end_date=end_date,
    )
