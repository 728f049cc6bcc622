"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from wallet_ledger.domain.entities import (
    Account,
    Category,
    MonthYear,
    Transaction,
    TransactionDTO,
)


class AccountRepository(ABC):
    """
    The narrow slice of account storage the ledger needs.

    Account CRUD lives elsewhere; the ledger only reads an account by
    token and writes its balance.
    """

    @abstractmethod
    async def get_by_token(self, token: str, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve an account by its token.

        Args:
            token: The account's external identifier
            for_update: Lock the account row until the unit of work ends,
                where the database supports row locks

        Returns:
            The account if found, None otherwise
        """
        ...

    @abstractmethod
    async def update_balance(
        self,
        token: str,
        new_balance: Decimal,
        expected_version: int,
    ) -> Account:
        """
        Write a new balance if the account version is still expected_version.

        Returns:
            The account with the new balance and bumped version

        Raises:
            ConcurrencyConflictException: If another writer got there first
        """
        ...

    @abstractmethod
    async def add(self, account: Account) -> Account:
        ...


class CategoryRepository(ABC):
    @abstractmethod
    async def get_by_id(self, category_id: int, user_id: int) -> Optional[Category]:
        """
        Retrieve a category owned by user_id.

        Soft-deleted categories are returned as well.
        """
        ...

    @abstractmethod
    async def add(self, category: Category) -> Category:
        ...


class TransactionRepository(ABC):
    """
    Storage for transaction rows and their joined DTO projection.

    Listing queries are always scoped to one account token.
    """

    @abstractmethod
    async def add(self, transaction: Transaction) -> Transaction:
        """Insert a row; returns the transaction with id and created_at set."""
        ...

    @abstractmethod
    async def update(self, transaction: Transaction) -> Transaction:
        """Raises TransactionNotFoundException if the row no longer exists."""
        ...

    @abstractmethod
    async def delete(self, transaction_id: int) -> None:
        """Raises TransactionNotFoundException if the row no longer exists."""
        ...

    @abstractmethod
    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        ...

    @abstractmethod
    async def get_dto_by_id(self, transaction_id: int) -> Optional[TransactionDTO]:
        ...

    @abstractmethod
    async def list_by_account(
        self,
        account_token: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[Transaction]:
        """
        List an account's transactions, newest first (date desc, id desc).

        The month/year filter only applies when both are given.
        """
        ...

    @abstractmethod
    async def list_dtos_by_account(
        self,
        account_token: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[TransactionDTO]:
        """Same as list_by_account, joined with category and transaction type."""
        ...

    @abstractmethod
    async def get_available_months(self, account_token: str) -> List[MonthYear]:
        """
        Distinct (year, month, count) periods over the full history.

        Returns:
            Periods ordered year desc, month desc
        """
        ...
