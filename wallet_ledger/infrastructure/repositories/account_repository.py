"""SQLAlchemy implementation of AccountRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wallet_ledger.domain.entities import Account
from wallet_ledger.domain.exceptions import ConcurrencyConflictException
from wallet_ledger.domain.interfaces import AccountRepository
from wallet_ledger.infrastructure.database.models import AccountModel


class SqlAlchemyAccountRepository(AccountRepository):
    """
    Account storage for the ledger.

    Balance writes are compare-and-write on the version column, so a
    writer holding a stale read fails instead of overwriting.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_token(self, token: str, for_update: bool = False) -> Optional[Account]:
        """Retrieve an account, optionally locking its row (no-op on SQLite)."""
        stmt = (
            select(AccountModel)
            .where(AccountModel.token == token)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def update_balance(
        self,
        token: str,
        new_balance: Decimal,
        expected_version: int,
    ) -> Account:
        """Write the balance if nobody bumped the version since our read."""
        stmt = (
            update(AccountModel)
            .where(
                AccountModel.token == token,
                AccountModel.version == expected_version,
            )
            .values(balance=new_balance, version=AccountModel.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        if result.rowcount != 1:
            raise ConcurrencyConflictException(token)

        account = await self.get_by_token(token)
        if account is None:
            raise ConcurrencyConflictException(token)
        return account

    async def add(self, account: Account) -> Account:
        model = AccountModel(
            token=account.token,
            user_id=account.user_id,
            account_name=account.account_name,
            balance=account.balance,
            version=account.version,
        )
        self._session.add(model)
        await self._session.flush()

        return self._to_entity(model)

    def _to_entity(self, model: AccountModel) -> Account:
        """Convert database model to domain entity."""
        return Account(
            id=model.id,
            token=model.token,
            user_id=model.user_id,
            account_name=model.account_name,
            balance=Decimal(model.balance),
            version=model.version,
            created_at=model.created_at,
        )
