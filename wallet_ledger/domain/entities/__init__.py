"""Domain Entities - Core business objects."""

from .account import Account
from .category import Category, CategoryRef, TransactionKind, TransactionTypeRef
from .statistics import (
    CategoryStatistic,
    DailyTotal,
    GroupedTransactions,
    MonthYear,
    TransactionGroup,
    TransactionStatistics,
    TransactionTotals,
)
from .transaction import Transaction, TransactionDTO

__all__ = [
    "Account",
    "Category",
    "CategoryRef",
    "TransactionKind",
    "TransactionTypeRef",
    "Transaction",
    "TransactionDTO",
    "CategoryStatistic",
    "DailyTotal",
    "GroupedTransactions",
    "MonthYear",
    "TransactionGroup",
    "TransactionStatistics",
    "TransactionTotals",
]
