"""Repository implementations."""

from .account_repository import SqlAlchemyAccountRepository
from .category_repository import SqlAlchemyCategoryRepository
from .transaction_repository import SqlAlchemyTransactionRepository

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyCategoryRepository",
    "SqlAlchemyTransactionRepository",
]
