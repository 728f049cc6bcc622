"""
Integration tests for conflict handling on a real database.

A competing writer commits a balance change between the ledger's read
and its write. The ledger must notice the stale version, roll back and
replay the mutation on fresh data instead of losing the other update.
"""

from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio

from wallet_ledger.application.dto import CreateTransactionRequest, UpdateTransactionRequest
from wallet_ledger.application.services import LedgerService
from wallet_ledger.domain.entities import Transaction
from wallet_ledger.domain.exceptions import ConcurrencyConflictException, TransactionNotFoundException
from wallet_ledger.infrastructure.database.unit_of_work import SqlAlchemyUnitOfWork
from wallet_ledger.service.ledger import LedgerSettings

from ledger_data import ACCOUNT, GROCERIES, SALARY, START_BALANCE, USER_ID

SETTINGS = LedgerSettings(max_retries=3, retry_backoff_seconds=0)


class InterleavedUnitOfWork(SqlAlchemyUnitOfWork):
    """Commits a competing balance write right after the ledger reads the account."""

    def __init__(self, session_factory, competitor):
        super().__init__(session_factory)
        self._competitor = competitor

    async def __aenter__(self):
        await super().__aenter__()
        read = self.accounts.get_by_token

        async def get_by_token(token, for_update=False):
            account = await read(token, for_update=for_update)
            if for_update:
                await self._competitor(token)
            return account

        self.accounts.get_by_token = get_by_token
        return self


def competing_writer(session_factory, rounds: int, amount: Decimal):
    """Add `amount` to the balance on the first `rounds` calls, in its own unit of work."""
    state = {"left": rounds}

    async def compete(token: str) -> None:
        if state["left"] == 0:
            return
        state["left"] -= 1
        async with SqlAlchemyUnitOfWork(session_factory) as uow:
            account = await uow.accounts.get_by_token(token)
            await uow.accounts.update_balance(token, account.balance + amount, account.version)

    return compete


def salary(amount: str) -> CreateTransactionRequest:
    return CreateTransactionRequest(
        account_token=ACCOUNT,
        category_id=SALARY,
        amount=Decimal(amount),
        description="",
        date=date(2024, 1, 5),
    )


class TestConflictRetry:
    @pytest.mark.asyncio
    async def test_lost_race_is_replayed_on_fresh_balance(self, session_factory, read_balance):
        competitor = competing_writer(session_factory, rounds=1, amount=Decimal("5.00"))
        ledger = LedgerService(
            lambda: InterleavedUnitOfWork(session_factory, competitor),
            settings=LedgerSettings(max_retries=3, retry_backoff_seconds=0),
        )

        transaction = await ledger.create_transaction(USER_ID, salary("10"))

        # Both writes survive: 1000 + 5 from the competitor, then + 10
        assert await read_balance() == Decimal("1015.00")
        assert transaction.balance == Decimal("1015.00")

    @pytest.mark.asyncio
    async def test_exhausted_retries_leave_no_partial_write(self, session_factory, read_balance, uow_factory):
        competitor = competing_writer(session_factory, rounds=10, amount=Decimal("1.00"))
        ledger = LedgerService(
            lambda: InterleavedUnitOfWork(session_factory, competitor),
            settings=LedgerSettings(max_retries=2, retry_backoff_seconds=0),
        )

        with pytest.raises(ConcurrencyConflictException):
            await ledger.create_transaction(USER_ID, salary("10"))

        # Only the two competing writes landed
        assert await read_balance() == Decimal("1002.00")
        async with uow_factory() as uow:
            assert await uow.transactions.list_by_account(ACCOUNT) == []


class RowRaceUnitOfWork(SqlAlchemyUnitOfWork):
    """Lets a competing ledger call commit right after the first read of a transaction row."""

    def __init__(self, session_factory, competitor):
        super().__init__(session_factory)
        self._competitor = competitor

    async def __aenter__(self):
        await super().__aenter__()
        read = self.transactions.get_by_id

        async def get_by_id(transaction_id):
            transaction = await read(transaction_id)
            await self._competitor()
            return transaction

        self.transactions.get_by_id = get_by_id
        return self


def once(action):
    """Run `action` on the first call only."""
    state = {"done": False}

    async def run() -> None:
        if state["done"]:
            return
        state["done"] = True
        await action()

    return run


def update(transaction_id: int, category_id: int, amount: str) -> UpdateTransactionRequest:
    return UpdateTransactionRequest(
        transaction_id=transaction_id,
        amount=Decimal(amount),
        category_id=category_id,
        description="",
        date=date(2024, 1, 5),
    )


class TestSameRowRace:
    """A second writer on the same row commits between the first read and the account lock."""

    @pytest_asyncio.fixture
    async def created(self, uow_factory) -> Transaction:
        ledger = LedgerService(uow_factory, settings=SETTINGS)
        return await ledger.create_transaction(USER_ID, salary("100"))

    def racing_ledger(self, session_factory, competing_call) -> LedgerService:
        competitor = once(competing_call)
        return LedgerService(
            lambda: RowRaceUnitOfWork(session_factory, competitor),
            settings=SETTINGS,
        )

    async def signed_total(self, uow_factory) -> Decimal:
        total = Decimal("0.00")
        async with uow_factory() as uow:
            for dto in await uow.transactions.list_dtos_by_account(ACCOUNT):
                total += dto.amount if dto.is_credit else -dto.amount
        return total

    @pytest.mark.asyncio
    async def test_delete_after_competing_delete(self, session_factory, uow_factory, read_balance, created):
        other = LedgerService(uow_factory, settings=SETTINGS)
        ledger = self.racing_ledger(session_factory, lambda: other.delete_transaction(USER_ID, created.id))

        with pytest.raises(TransactionNotFoundException):
            await ledger.delete_transaction(USER_ID, created.id)

        assert await read_balance() == START_BALANCE
        assert await self.signed_total(uow_factory) == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_update_after_competing_update(self, session_factory, uow_factory, read_balance, created):
        other = LedgerService(uow_factory, settings=SETTINGS)
        ledger = self.racing_ledger(
            session_factory,
            lambda: other.update_transaction(USER_ID, update(created.id, SALARY, "130")),
        )

        await ledger.update_transaction(USER_ID, update(created.id, SALARY, "150"))

        assert await read_balance() == Decimal("1150.00")
        assert await read_balance() == START_BALANCE + await self.signed_total(uow_factory)

    @pytest.mark.asyncio
    async def test_update_after_competing_delete(self, session_factory, uow_factory, read_balance, created):
        other = LedgerService(uow_factory, settings=SETTINGS)
        ledger = self.racing_ledger(session_factory, lambda: other.delete_transaction(USER_ID, created.id))

        with pytest.raises(TransactionNotFoundException):
            await ledger.update_transaction(USER_ID, update(created.id, GROCERIES, "40"))

        assert await read_balance() == START_BALANCE
        assert await self.signed_total(uow_factory) == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_delete_after_competing_update(self, session_factory, uow_factory, read_balance, created):
        other = LedgerService(uow_factory, settings=SETTINGS)
        ledger = self.racing_ledger(
            session_factory,
            lambda: other.update_transaction(USER_ID, update(created.id, GROCERIES, "40")),
        )

        balance = await ledger.delete_transaction(USER_ID, created.id)

        assert balance == START_BALANCE
        assert await read_balance() == START_BALANCE
        assert await self.signed_total(uow_factory) == Decimal("0.00")
