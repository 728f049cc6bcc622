"""
In-memory fakes of the repository ports and the unit of work.

The fake unit of work stages every write and applies it on commit. A
balance write is compare-and-write on the account version, both when
staged and again at commit, which is how the SQL repository behaves.
"""

import asyncio
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from wallet_ledger.domain.entities import (
    Account,
    Category,
    CategoryRef,
    MonthYear,
    Transaction,
    TransactionDTO,
    TransactionKind,
    TransactionTypeRef,
)
from wallet_ledger.domain.exceptions import ConcurrencyConflictException, TransactionNotFoundException
from wallet_ledger.domain.interfaces import (
    AccountRepository,
    CategoryRepository,
    TransactionRepository,
    UnitOfWork,
)
from wallet_ledger.service.ledger import available_months

USER_ID = 1
OTHER_USER_ID = 2
ACCOUNT = "acc-1"
OTHER_ACCOUNT = "acc-other"

SALARY = 1
GROCERIES = 2
TRANSFER = 3
BONUS = 4
RENT = 5


def type_ref(kind: TransactionKind) -> TransactionTypeRef:
    return TransactionTypeRef(id=kind.value, type_name=kind.name.title(), type_slug=kind.slug)


def make_dto(
    tx_id: int,
    amount: str,
    kind: Optional[TransactionKind],
    day: date,
    category_name: str = "General",
    color: str = "#000000",
    balance: str = "0.00",
) -> TransactionDTO:
    """Build a TransactionDTO; kind=None leaves the category out."""
    category = None
    if kind is not None:
        category = CategoryRef(
            id=tx_id,
            category_name=category_name,
            color=color,
            transaction_type=type_ref(kind),
        )
    return TransactionDTO(
        id=tx_id,
        account_token=ACCOUNT,
        amount=Decimal(amount),
        description="",
        date=day,
        balance=Decimal(balance),
        category=category,
    )


# =============================================================================
# In-memory store
# =============================================================================

@dataclass
class InMemoryStore:
    accounts: Dict[str, Account] = field(default_factory=dict)
    categories: Dict[int, Category] = field(default_factory=dict)
    transactions: Dict[int, Transaction] = field(default_factory=dict)
    next_id: int = 1
    commits: int = 0
    rollbacks: int = 0
    conflict_on_commit: bool = False
    fail_on_add: bool = False

    def new_id(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value

    def balance(self, token: str = ACCOUNT) -> Decimal:
        return self.accounts[token].balance


class FakeAccountRepository(AccountRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store
        self.staged: Dict[str, tuple] = {}

    async def get_by_token(self, token: str, for_update: bool = False) -> Optional[Account]:
        # Yield so that concurrent units of work interleave between read and write
        await asyncio.sleep(0)
        if token in self.staged:
            return replace(self.staged[token][0])
        account = self._store.accounts.get(token)
        return replace(account) if account else None

    async def update_balance(self, token: str, new_balance: Decimal, expected_version: int) -> Account:
        current = self._store.accounts.get(token)
        if current is None or current.version != expected_version:
            raise ConcurrencyConflictException(token)
        updated = replace(current, balance=new_balance, version=expected_version + 1)
        self.staged[token] = (updated, expected_version)
        return replace(updated)

    async def add(self, account: Account) -> Account:
        self._store.accounts[account.token] = account
        return account


class FakeCategoryRepository(CategoryRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_by_id(self, category_id: int, user_id: int) -> Optional[Category]:
        category = self._store.categories.get(category_id)
        if category is None or category.user_id != user_id:
            return None
        return category

    async def add(self, category: Category) -> Category:
        category.id = category.id or self._store.new_id()
        self._store.categories[category.id] = category
        return category


class FakeTransactionRepository(TransactionRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store
        # None marks a staged delete
        self.staged: Dict[int, Optional[Transaction]] = {}

    def _rows(self) -> Dict[int, Transaction]:
        rows = dict(self._store.transactions)
        for tx_id, tx in self.staged.items():
            if tx is None:
                rows.pop(tx_id, None)
            else:
                rows[tx_id] = tx
        return rows

    def _to_dto(self, tx: Transaction) -> TransactionDTO:
        category = self._store.categories.get(tx.category_id)
        ref = None
        if category is not None:
            try:
                kind_ref = type_ref(TransactionKind(category.transaction_type_id))
            except ValueError:
                kind_ref = None
            ref = CategoryRef(
                id=category.id,
                category_name=category.category_name,
                color=category.color,
                transaction_type=kind_ref,
            )
        return TransactionDTO(
            id=tx.id,
            account_token=tx.account_token,
            amount=tx.amount,
            description=tx.description,
            date=tx.date,
            balance=tx.balance,
            created_at=tx.created_at,
            category=ref,
        )

    async def add(self, transaction: Transaction) -> Transaction:
        if self._store.fail_on_add:
            raise RuntimeError("insert failed")
        stored = replace(transaction, id=self._store.new_id())
        self.staged[stored.id] = stored
        return stored

    async def update(self, transaction: Transaction) -> Transaction:
        if transaction.id not in self._rows():
            raise TransactionNotFoundException(transaction.id)
        self.staged[transaction.id] = replace(transaction)
        return transaction

    async def delete(self, transaction_id: int) -> None:
        if transaction_id not in self._rows():
            raise TransactionNotFoundException(transaction_id)
        self.staged[transaction_id] = None

    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        await asyncio.sleep(0)
        tx = self._rows().get(transaction_id)
        return replace(tx) if tx else None

    async def get_dto_by_id(self, transaction_id: int) -> Optional[TransactionDTO]:
        tx = self._rows().get(transaction_id)
        return self._to_dto(tx) if tx else None

    async def list_by_account(
        self,
        account_token: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[Transaction]:
        rows = [
            tx
            for tx in self._rows().values()
            if tx.account_token == account_token
            and (month is None or year is None or (tx.date.month == month and tx.date.year == year))
        ]
        return sorted(rows, key=lambda tx: (tx.date, tx.id), reverse=True)

    async def list_dtos_by_account(
        self,
        account_token: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[TransactionDTO]:
        return [self._to_dto(tx) for tx in await self.list_by_account(account_token, month, year)]

    async def get_available_months(self, account_token: str) -> List[MonthYear]:
        return available_months(await self.list_dtos_by_account(account_token))


class FakeUnitOfWork(UnitOfWork):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def __aenter__(self) -> "FakeUnitOfWork":
        self.accounts = FakeAccountRepository(self._store)
        self.categories = FakeCategoryRepository(self._store)
        self.transactions = FakeTransactionRepository(self._store)
        return self

    async def commit(self) -> None:
        for token, (account, expected_version) in self.accounts.staged.items():
            if self._store.conflict_on_commit or self._store.accounts[token].version != expected_version:
                self._store.rollbacks += 1
                raise ConcurrencyConflictException(token)

        for token, (account, _) in self.accounts.staged.items():
            self._store.accounts[token] = account
        for tx_id, tx in self.transactions.staged.items():
            if tx is None:
                self._store.transactions.pop(tx_id, None)
            else:
                self._store.transactions[tx_id] = tx
        self._store.commits += 1

    async def rollback(self) -> None:
        self.accounts.staged.clear()
        self.transactions.staged.clear()
        self._store.rollbacks += 1

