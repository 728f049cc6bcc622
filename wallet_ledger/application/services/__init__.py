"""Application services (use cases)."""

from .ledger_service import LedgerService
from .statement_service import StatementService

__all__ = [
    "LedgerService",
    "StatementService",
]
