"""
Ledger computation module: category classification, statistics and
month grouping. Everything here is pure; persistence lives in the
application and infrastructure layers.
"""

from .settings import LedgerSettings, ledger_settings
from .money import round_money, to_decimal
from .classifier import classify, ensure_ledger_kind, signed_amount
from .statistics import (
    build_category_breakdown,
    calculate_daily_totals,
    calculate_largest_amounts,
    calculate_totals,
    compute_statistics,
    month_date_range,
)
from .grouping import available_months, group_by_month, group_with_totals, parse_period

__all__ = [
    # Settings
    "LedgerSettings",
    "ledger_settings",
    # Money
    "round_money",
    "to_decimal",
    # Classifier
    "classify",
    "ensure_ledger_kind",
    "signed_amount",
    # Statistics
    "build_category_breakdown",
    "calculate_daily_totals",
    "calculate_largest_amounts",
    "calculate_totals",
    "compute_statistics",
    "month_date_range",
    # Grouping
    "available_months",
    "group_by_month",
    "group_with_totals",
    "parse_period",
]
