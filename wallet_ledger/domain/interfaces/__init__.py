"""
Domain Interfaces (Ports)
"""

from .repositories import AccountRepository, CategoryRepository, TransactionRepository
from .unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "AccountRepository",
    "CategoryRepository",
    "TransactionRepository",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
