"""Unit of work interface: one database transaction spanning several repositories."""

from abc import ABC, abstractmethod
from typing import Callable

from .repositories import AccountRepository, CategoryRepository, TransactionRepository


class UnitOfWork(ABC):
    """
    Transactional scope shared by the account, category and transaction
    repositories.

    Usage:
        async with uow_factory() as uow:
            account = await uow.accounts.get_by_token(token, for_update=True)
            ...

    Leaving the block normally commits; leaving it with an exception
    rolls every write back.
    """

    accounts: AccountRepository
    categories: CategoryRepository
    transactions: TransactionRepository

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
