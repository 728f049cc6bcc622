"""Derived, never-persisted views over a set of transactions."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from .transaction import TransactionDTO


@dataclass(frozen=True)
class TransactionTotals:
    """Sum of credits, sum of debits, and credit minus debit."""

    credit: Decimal
    debit: Decimal
    difference: Decimal

    def to_dict(self) -> dict:
        return {
            "credit": float(self.credit),
            "debit": float(self.debit),
            "difference": float(self.difference),
        }


@dataclass(frozen=True)
class CategoryStatistic:
    """Per-category aggregate within one transaction type."""

    name: str
    count: int
    total: Decimal
    percentage: Decimal
    color: str


@dataclass(frozen=True)
class DailyTotal:
    """Net signed total of one calendar day (YYYY-MM-DD)."""

    date: str
    total: Decimal


@dataclass(frozen=True)
class TransactionStatistics:
    total_transactions: int
    largest_credit: Decimal
    largest_debit: Decimal
    totals: TransactionTotals
    credit_category_breakdown: List[CategoryStatistic] = field(default_factory=list)
    debit_category_breakdown: List[CategoryStatistic] = field(default_factory=list)
    daily_totals: List[DailyTotal] = field(default_factory=list)
    start_date: str = ""
    end_date: str = ""


@dataclass(frozen=True)
class MonthYear:
    """A (year, month) period holding at least one transaction."""

    year: int
    month: int
    count: int

    def to_dict(self) -> dict:
        return {"year": self.year, "month": self.month, "count": self.count}


@dataclass(frozen=True)
class TransactionGroup:
    """Transactions of one calendar month, most recent first."""

    year: int
    month: int
    transactions: List[TransactionDTO]


@dataclass(frozen=True)
class GroupedTransactions:
    """Statement-by-month view with the totals of the listed transactions."""

    groups: List[TransactionGroup]
    totals: TransactionTotals
