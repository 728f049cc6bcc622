"""Data Transfer Objects for application layer."""

from .transaction import (
    CreateTransactionRequest,
    TransactionChange,
    UpdateTransactionRequest,
)

__all__ = [
    "CreateTransactionRequest",
    "UpdateTransactionRequest",
    "TransactionChange",
]
