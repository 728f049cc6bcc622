"""Pydantic schemas for API request/response validation."""

from .transaction import (
    AvailableMonthsResponseSchema,
    CategorySchema,
    MonthYearSchema,
    TransactionChangeResponseSchema,
    TransactionCreateSchema,
    TransactionDTOSchema,
    TransactionListResponseSchema,
    TransactionSchema,
    TransactionUpdateSchema,
)
from .statistics import (
    GroupedTransactionsResponseSchema,
    TotalsSchema,
    TransactionStatisticsResponseSchema,
)
from .error import ErrorResponseSchema, FieldErrorSchema

__all__ = [
    "AvailableMonthsResponseSchema",
    "CategorySchema",
    "MonthYearSchema",
    "TransactionChangeResponseSchema",
    "TransactionCreateSchema",
    "TransactionDTOSchema",
    "TransactionListResponseSchema",
    "TransactionSchema",
    "TransactionUpdateSchema",
    "GroupedTransactionsResponseSchema",
    "TotalsSchema",
    "TransactionStatisticsResponseSchema",
    "ErrorResponseSchema",
    "FieldErrorSchema",
]
