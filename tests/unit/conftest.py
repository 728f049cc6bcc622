"""
Fixtures for unit tests: an in-memory store seeded with one account per
user and a category of every kind, wired into the ledger services.
"""

from decimal import Decimal

import pytest

from wallet_ledger.application.services import LedgerService, StatementService
from wallet_ledger.domain.entities import Account, Category, TransactionKind
from wallet_ledger.service.ledger import LedgerSettings

from fakes import (
    ACCOUNT,
    BONUS,
    GROCERIES,
    OTHER_ACCOUNT,
    OTHER_USER_ID,
    RENT,
    SALARY,
    TRANSFER,
    USER_ID,
    FakeUnitOfWork,
    InMemoryStore,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store() -> InMemoryStore:
    """Store with one account per user and a category of every kind."""
    store = InMemoryStore(next_id=100)
    store.accounts[ACCOUNT] = Account(
        token=ACCOUNT, user_id=USER_ID, account_name="Main", balance=Decimal("1000.00")
    )
    store.accounts[OTHER_ACCOUNT] = Account(
        token=OTHER_ACCOUNT, user_id=OTHER_USER_ID, account_name="Other", balance=Decimal("50.00")
    )
    for category_id, kind, name in [
        (SALARY, TransactionKind.CREDIT, "Salary"),
        (GROCERIES, TransactionKind.DEBIT, "Groceries"),
        (TRANSFER, TransactionKind.TRANSFER, "Transfer"),
        (BONUS, TransactionKind.CREDIT, "Bonus"),
        (RENT, TransactionKind.DEBIT, "Rent"),
    ]:
        store.categories[category_id] = Category(
            id=category_id,
            user_id=USER_ID,
            transaction_type_id=kind.value,
            category_name=name,
            color="#123456",
        )
    return store


@pytest.fixture
def uow_factory(store: InMemoryStore):
    return lambda: FakeUnitOfWork(store)


@pytest.fixture
def ledger_settings() -> LedgerSettings:
    return LedgerSettings(max_retries=5, retry_backoff_seconds=0)


@pytest.fixture
def ledger(uow_factory, ledger_settings) -> LedgerService:
    return LedgerService(uow_factory, settings=ledger_settings)


@pytest.fixture
def statements(uow_factory, ledger_settings) -> StatementService:
    return StatementService(uow_factory, settings=ledger_settings)
