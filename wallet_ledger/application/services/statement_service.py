"""Statement service - read-only views over an account's transactions."""

from datetime import date
from typing import List, Optional

import structlog

from wallet_ledger.core.metrics import record_statement_request, record_statistics_request
from wallet_ledger.domain.entities import (
    Account,
    GroupedTransactions,
    MonthYear,
    Transaction,
    TransactionStatistics,
)
from wallet_ledger.domain.exceptions import AccountNotFoundException, PermissionDeniedException
from wallet_ledger.domain.interfaces import UnitOfWork, UnitOfWorkFactory
from wallet_ledger.service.ledger import (
    LedgerSettings,
    compute_statistics,
    group_with_totals,
    ledger_settings,
    parse_period,
)

logger = structlog.get_logger(__name__)


class StatementService:
    """
    Application service for statement and statistics reads.

    Each read runs in its own unit of work and never writes. Every call
    checks that the acting user owns the account.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: LedgerSettings = ledger_settings,
    ):
        self._uow_factory = uow_factory
        self._settings = settings

    async def get_transactions(
        self,
        user_id: int,
        account_token: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[Transaction]:
        """List raw transactions, newest first, optionally for one month."""
        month, year = parse_period(month, year)

        async with self._uow_factory() as uow:
            await self._check_owner(uow, account_token, user_id)
            transactions = await uow.transactions.list_by_account(account_token, month, year)

        record_statement_request("list")
        return transactions

    async def get_grouped_transactions(
        self,
        user_id: int,
        account_token: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> GroupedTransactions:
        """
        Transactions grouped by calendar month, most recent month first,
        with credit/debit totals of everything listed.
        """
        month, year = parse_period(month, year)

        async with self._uow_factory() as uow:
            await self._check_owner(uow, account_token, user_id)
            dtos = await uow.transactions.list_dtos_by_account(account_token, month, year)

        record_statement_request("grouped")
        return group_with_totals(dtos)

    async def get_statistics(
        self,
        user_id: int,
        account_token: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
        today: Optional[date] = None,
    ) -> TransactionStatistics:
        """
        Compute statistics for the account, optionally limited to one month.

        Args:
            user_id: The acting user
            account_token: The account to summarize
            month: Month filter (requires year)
            year: Year filter (requires month)
            today: End of the open-ended range when no month is given

        Returns:
            TransactionStatistics for the selected transactions
        """
        month, year = parse_period(month, year)

        async with self._uow_factory() as uow:
            await self._check_owner(uow, account_token, user_id)
            dtos = await uow.transactions.list_dtos_by_account(account_token, month, year)

        statistics = compute_statistics(dtos, month, year, today=today, settings=self._settings)

        record_statistics_request(filtered=month is not None)
        logger.debug(
            "statistics_computed",
            account_token=account_token,
            total_transactions=statistics.total_transactions,
        )
        return statistics

    async def get_available_months(self, user_id: int, account_token: str) -> List[MonthYear]:
        async with self._uow_factory() as uow:
            await self._check_owner(uow, account_token, user_id)
            months = await uow.transactions.get_available_months(account_token)

        record_statement_request("months")
        return months

    async def _check_owner(self, uow: UnitOfWork, account_token: str, user_id: int) -> Account:
        account = await uow.accounts.get_by_token(account_token)
        if account is None:
            raise AccountNotFoundException(account_token)
        if not account.is_owned_by(user_id):
            raise PermissionDeniedException("account", user_id)
        return account
