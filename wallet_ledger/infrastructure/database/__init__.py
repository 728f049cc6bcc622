"""Database infrastructure."""

from .connection import (
    DatabaseSessionManager,
    db_manager,
    make_sessionmaker,
    normalize_database_url,
)
from .models import (
    AccountModel,
    Base,
    CategoryModel,
    TransactionModel,
    TransactionTypeModel,
)
from .seed import seed_transaction_types

__all__ = [
    "DatabaseSessionManager",
    "db_manager",
    "make_sessionmaker",
    "normalize_database_url",
    "Base",
    "AccountModel",
    "CategoryModel",
    "TransactionModel",
    "TransactionTypeModel",
    "seed_transaction_types",
]
