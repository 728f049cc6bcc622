"""Unit tests for StatementService reads."""

from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio

from wallet_ledger.application.dto import CreateTransactionRequest
from wallet_ledger.domain.exceptions import (
    AccountNotFoundException,
    PermissionDeniedException,
    ValidationFailedException,
)

from fakes import ACCOUNT, GROCERIES, OTHER_ACCOUNT, SALARY, USER_ID


async def record(ledger, category_id: int, amount: str, day: date):
    return await ledger.create_transaction(
        USER_ID,
        CreateTransactionRequest(
            account_token=ACCOUNT,
            category_id=category_id,
            amount=Decimal(amount),
            description="",
            date=day,
        ),
    )


@pytest_asyncio.fixture
async def seeded(ledger):
    await record(ledger, SALARY, "200", date(2024, 1, 5))
    await record(ledger, GROCERIES, "30", date(2024, 1, 20))
    await record(ledger, GROCERIES, "90", date(2024, 2, 1))
    return ledger


class TestStatementService:
    @pytest.mark.asyncio
    async def test_transactions_newest_first(self, seeded, statements):
        transactions = await statements.get_transactions(USER_ID, ACCOUNT)

        assert [tx.date for tx in transactions] == [
            date(2024, 2, 1),
            date(2024, 1, 20),
            date(2024, 1, 5),
        ]

    @pytest.mark.asyncio
    async def test_month_filter(self, seeded, statements):
        transactions = await statements.get_transactions(USER_ID, ACCOUNT, month=1, year=2024)

        assert len(transactions) == 2

    @pytest.mark.asyncio
    async def test_grouped_view(self, seeded, statements):
        grouped = await statements.get_grouped_transactions(USER_ID, ACCOUNT)

        assert [(g.year, g.month) for g in grouped.groups] == [(2024, 2), (2024, 1)]
        assert grouped.totals.credit == Decimal("200.00")
        assert grouped.totals.debit == Decimal("120.00")

    @pytest.mark.asyncio
    async def test_statistics_are_stable(self, seeded, statements):
        first = await statements.get_statistics(USER_ID, ACCOUNT, today=date(2024, 3, 1))
        second = await statements.get_statistics(USER_ID, ACCOUNT, today=date(2024, 3, 1))

        assert first == second
        assert first.largest_debit == Decimal("90.00")
        assert first.start_date == "2024-01-05"
        assert first.end_date == "2024-03-01"

    @pytest.mark.asyncio
    async def test_available_months(self, seeded, statements):
        months = await statements.get_available_months(USER_ID, ACCOUNT)

        assert [(m.year, m.month, m.count) for m in months] == [(2024, 2, 1), (2024, 1, 2)]

    @pytest.mark.asyncio
    async def test_half_period_is_rejected(self, statements):
        with pytest.raises(ValidationFailedException):
            await statements.get_statistics(USER_ID, ACCOUNT, month=1)

    @pytest.mark.asyncio
    async def test_foreign_account_is_denied(self, statements):
        with pytest.raises(PermissionDeniedException):
            await statements.get_transactions(USER_ID, OTHER_ACCOUNT)

    @pytest.mark.asyncio
    async def test_missing_account(self, statements):
        with pytest.raises(AccountNotFoundException):
            await statements.get_available_months(USER_ID, "nope")
