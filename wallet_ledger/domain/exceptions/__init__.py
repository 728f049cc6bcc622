"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .ledger import (
    ConcurrencyConflictException,
    PermissionDeniedException,
    UnsupportedOperationException,
)
from .not_found import (
    AccountNotFoundException,
    CategoryNotFoundException,
    NotFoundException,
    TransactionNotFoundException,
)
from .validation import FieldError, ValidationFailedException

__all__ = [
    "DomainException",
    "NotFoundException",
    "AccountNotFoundException",
    "CategoryNotFoundException",
    "TransactionNotFoundException",
    "PermissionDeniedException",
    "UnsupportedOperationException",
    "ConcurrencyConflictException",
    "FieldError",
    "ValidationFailedException",
]
