"""Ledger service - keeps account balances in step with their transactions."""

import asyncio
from dataclasses import replace
from decimal import Decimal
from functools import partial
from typing import Awaitable, Callable, List, Tuple, TypeVar

import structlog

from wallet_ledger.application.dto import (
    CreateTransactionRequest,
    TransactionChange,
    UpdateTransactionRequest,
)
from wallet_ledger.core.metrics import (
    record_ledger_amount,
    record_ledger_conflict,
    record_ledger_operation,
    track_ledger_latency,
)
from wallet_ledger.domain.entities import Account, Category, Transaction
from wallet_ledger.domain.exceptions import (
    AccountNotFoundException,
    CategoryNotFoundException,
    ConcurrencyConflictException,
    DomainException,
    PermissionDeniedException,
    TransactionNotFoundException,
    ValidationFailedException,
)
from wallet_ledger.domain.interfaces import UnitOfWork, UnitOfWorkFactory
from wallet_ledger.service.ledger import (
    LedgerSettings,
    classify,
    ensure_ledger_kind,
    ledger_settings,
    round_money,
    signed_amount,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Side effects (metrics, log events) queued by one attempt, run only once it commits
AfterCommit = List[Callable[[], None]]


class LedgerService:
    """
    Application service for transaction mutations.

    Every mutation locks the account, reads the rows it depends on under
    that lock, computes the new balance and writes both the account and
    the transaction row inside one unit of work. If another writer changed
    the account in between, the whole unit of work is rolled back and
    replayed on a fresh read.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: LedgerSettings = ledger_settings,
    ):
        self._uow_factory = uow_factory
        self._settings = settings

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_transaction(
        self,
        user_id: int,
        request: CreateTransactionRequest,
    ) -> Transaction:
        """
        Record a transaction and apply it to the account balance.

        Args:
            user_id: The acting user, must own the account
            request: Transaction data

        Returns:
            The stored transaction with id and balance snapshot

        Raises:
            ValidationFailedException: If request validation fails
            CategoryNotFoundException: If the category is not the user's
            UnsupportedOperationException: For Transfer categories
            AccountNotFoundException: If the account does not exist
            PermissionDeniedException: If the user does not own the account
            ConcurrencyConflictException: If every retry lost the race
        """
        self._check(request)

        async def work(uow: UnitOfWork, after_commit: AfterCommit) -> Transaction:
            transaction, _ = await self._create(uow, user_id, request, after_commit)
            return transaction

        return await self._run("create", work, user_id=user_id, account_token=request.account_token)

    async def create_and_return(
        self,
        user_id: int,
        request: CreateTransactionRequest,
    ) -> TransactionChange:
        """Create a transaction and return it joined, with balance and months."""
        self._check(request)

        async def work(uow: UnitOfWork, after_commit: AfterCommit) -> TransactionChange:
            transaction, account = await self._create(uow, user_id, request, after_commit)
            return await self._change(uow, transaction.id, account)

        return await self._run("create", work, user_id=user_id, account_token=request.account_token)

    async def _create(
        self,
        uow: UnitOfWork,
        user_id: int,
        request: CreateTransactionRequest,
        after_commit: AfterCommit,
    ) -> Tuple[Transaction, Account]:
        category = await self._load_category(uow, request.category_id, user_id)
        kind = ensure_ledger_kind(category)
        account = await self._load_account(uow, request.account_token, user_id)

        delta = signed_amount(request.amount, kind)
        new_balance = round_money(account.balance + delta)

        account = await uow.accounts.update_balance(account.token, new_balance, account.version)
        transaction = await uow.transactions.add(
            Transaction(
                account_token=account.token,
                category_id=category.id,
                amount=round_money(request.amount),
                description=request.description,
                date=request.date,
                balance=new_balance,
            )
        )

        after_commit.append(partial(record_ledger_amount, kind.slug, request.amount))
        after_commit.append(
            partial(
                logger.info,
                "transaction_created",
                transaction_id=transaction.id,
                account_token=account.token,
                kind=kind.slug,
                balance=str(new_balance),
            )
        )
        return transaction, account

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def update_transaction(
        self,
        user_id: int,
        request: UpdateTransactionRequest,
    ) -> Transaction:
        """
        Edit a transaction and move the balance by the signed difference.

        The old and new signed amounts are computed from the old and new
        categories, so switching a Credit to a Debit moves the balance by
        both amounts.

        Raises:
            TransactionNotFoundException: If the transaction does not exist
            PermissionDeniedException: If the user does not own the account
            CategoryNotFoundException: If either category is not the user's
            UnsupportedOperationException: If the new category is a Transfer
        """
        self._check(request)

        async def work(uow: UnitOfWork, after_commit: AfterCommit) -> Transaction:
            transaction, _ = await self._update(uow, user_id, request, after_commit)
            return transaction

        return await self._run("update", work, user_id=user_id, transaction_id=request.transaction_id)

    async def update_and_return(
        self,
        user_id: int,
        request: UpdateTransactionRequest,
    ) -> TransactionChange:
        self._check(request)

        async def work(uow: UnitOfWork, after_commit: AfterCommit) -> TransactionChange:
            transaction, account = await self._update(uow, user_id, request, after_commit)
            return await self._change(uow, transaction.id, account)

        return await self._run("update", work, user_id=user_id, transaction_id=request.transaction_id)

    async def _update(
        self,
        uow: UnitOfWork,
        user_id: int,
        request: UpdateTransactionRequest,
        after_commit: AfterCommit,
    ) -> Tuple[Transaction, Account]:
        existing, account = await self._lock_transaction(uow, user_id, request.transaction_id)

        old_category = await self._load_category(uow, existing.category_id, user_id)
        new_category = await self._load_category(uow, request.category_id, user_id)
        old_kind = classify(old_category)
        new_kind = ensure_ledger_kind(new_category)

        difference = signed_amount(request.amount, new_kind) - signed_amount(existing.amount, old_kind)
        new_balance = round_money(account.balance + difference)

        account = await uow.accounts.update_balance(account.token, new_balance, account.version)
        transaction = await uow.transactions.update(
            replace(
                existing,
                category_id=new_category.id,
                amount=round_money(request.amount),
                description=request.description,
                date=request.date,
                balance=new_balance,
            )
        )

        after_commit.append(
            partial(
                logger.info,
                "transaction_updated",
                transaction_id=transaction.id,
                account_token=account.token,
                difference=str(difference),
                balance=str(new_balance),
            )
        )
        return transaction, account

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_transaction(self, user_id: int, transaction_id: int) -> Decimal:
        """
        Remove a transaction and reverse its effect on the balance.

        Returns:
            The account balance after removal

        Raises:
            TransactionNotFoundException: If the transaction does not exist
            PermissionDeniedException: If the user does not own the account
        """

        async def work(uow: UnitOfWork, after_commit: AfterCommit) -> Decimal:
            existing, account = await self._lock_transaction(uow, user_id, transaction_id)
            account = await self._delete(uow, user_id, existing, account, after_commit)
            return account.balance

        return await self._run("delete", work, user_id=user_id, transaction_id=transaction_id)

    async def delete_and_return(self, user_id: int, transaction_id: int) -> TransactionChange:
        """
        Delete a transaction and return the removed row.

        The returned row carries the account balance after removal, not
        its own stale snapshot.
        """

        async def work(uow: UnitOfWork, after_commit: AfterCommit) -> TransactionChange:
            existing, account = await self._lock_transaction(uow, user_id, transaction_id)
            removed = await uow.transactions.get_dto_by_id(transaction_id)
            if removed is None:
                raise TransactionNotFoundException(transaction_id)

            account = await self._delete(uow, user_id, existing, account, after_commit)
            months = await uow.transactions.get_available_months(account.token)
            return TransactionChange(
                transaction=replace(removed, balance=account.balance),
                account_balance=account.balance,
                months=months,
            )

        return await self._run("delete", work, user_id=user_id, transaction_id=transaction_id)

    async def _delete(
        self,
        uow: UnitOfWork,
        user_id: int,
        existing: Transaction,
        account: Account,
        after_commit: AfterCommit,
    ) -> Account:
        category = await self._load_category(uow, existing.category_id, user_id)

        new_balance = round_money(account.balance - signed_amount(existing.amount, classify(category)))

        account = await uow.accounts.update_balance(account.token, new_balance, account.version)
        await uow.transactions.delete(existing.id)

        after_commit.append(
            partial(
                logger.info,
                "transaction_deleted",
                transaction_id=existing.id,
                account_token=account.token,
                balance=str(new_balance),
            )
        )
        return account

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _run(
        self,
        operation: str,
        work: Callable[[UnitOfWork, AfterCommit], Awaitable[T]],
        **context,
    ) -> T:
        """
        Run work in a fresh unit of work, replaying it on concurrency conflicts.

        Backoff doubles after every lost race, starting at
        settings.retry_backoff_seconds. Callbacks queued by work run once,
        after the attempt that committed.
        """
        log = logger.bind(operation=operation, **context)
        attempt = 0

        with track_ledger_latency(operation):
            while True:
                attempt += 1
                after_commit: AfterCommit = []
                try:
                    async with self._uow_factory() as uow:
                        result = await work(uow, after_commit)
                except ConcurrencyConflictException:
                    record_ledger_conflict(operation)
                    if attempt >= self._settings.max_retries:
                        record_ledger_operation(operation, "CONCURRENCY_CONFLICT")
                        log.warning("ledger_conflict_exhausted", attempts=attempt)
                        raise

                    delay = self._settings.retry_backoff_seconds * 2 ** (attempt - 1)
                    log.info("ledger_conflict_retry", attempt=attempt, delay=delay)
                    await asyncio.sleep(delay)
                    continue
                except DomainException as exc:
                    record_ledger_operation(operation, exc.code)
                    log.info("ledger_operation_rejected", code=exc.code)
                    raise

                record_ledger_operation(operation, "success")
                for callback in after_commit:
                    callback()
                return result

    async def _change(
        self,
        uow: UnitOfWork,
        transaction_id: int,
        account: Account,
    ) -> TransactionChange:
        dto = await uow.transactions.get_dto_by_id(transaction_id)
        if dto is None:
            raise TransactionNotFoundException(transaction_id)
        months = await uow.transactions.get_available_months(account.token)
        return TransactionChange(transaction=dto, account_balance=account.balance, months=months)

    def _check(self, request) -> None:
        errors = request.validate(self._settings)
        if errors:
            raise ValidationFailedException(errors)

    async def _lock_transaction(
        self,
        uow: UnitOfWork,
        user_id: int,
        transaction_id: int,
    ) -> Tuple[Transaction, Account]:
        """
        Lock the transaction's account, then read the transaction again.

        The first read only finds the account. The row may change or
        disappear before the lock is taken, so the copy used for the
        balance arithmetic is the one read under the lock.
        """
        found = await self._load_transaction(uow, transaction_id)
        account = await self._load_account(uow, found.account_token, user_id)
        existing = await self._load_transaction(uow, transaction_id)
        return existing, account

    async def _load_account(self, uow: UnitOfWork, token: str, user_id: int) -> Account:
        account = await uow.accounts.get_by_token(token, for_update=True)
        if account is None:
            raise AccountNotFoundException(token)
        if not account.is_owned_by(user_id):
            raise PermissionDeniedException("account", user_id)
        return account

    async def _load_category(self, uow: UnitOfWork, category_id: int, user_id: int) -> Category:
        category = await uow.categories.get_by_id(category_id, user_id)
        if category is None:
            raise CategoryNotFoundException(category_id)
        return category

    async def _load_transaction(self, uow: UnitOfWork, transaction_id: int) -> Transaction:
        transaction = await uow.transactions.get_by_id(transaction_id)
        if transaction is None:
            raise TransactionNotFoundException(transaction_id)
        return transaction
