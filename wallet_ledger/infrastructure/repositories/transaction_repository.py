"""SQLAlchemy implementation of TransactionRepository."""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, extract, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from wallet_ledger.domain.entities import (
    CategoryRef,
    MonthYear,
    Transaction,
    TransactionDTO,
    TransactionTypeRef,
)
from wallet_ledger.domain.exceptions import TransactionNotFoundException
from wallet_ledger.domain.interfaces import TransactionRepository
from wallet_ledger.infrastructure.database.models import CategoryModel, TransactionModel


class SqlAlchemyTransactionRepository(TransactionRepository):
    """
    Transaction storage.

    Rows are always listed newest first: date desc, then id desc so that
    same-day entries come out in reverse insertion order.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, transaction: Transaction) -> Transaction:
        model = TransactionModel(
            account_token=transaction.account_token,
            category_id=transaction.category_id,
            amount=transaction.amount,
            description=transaction.description,
            date=transaction.date,
            balance=transaction.balance,
        )
        self._session.add(model)
        await self._session.flush()

        return self._to_entity(model)

    async def update(self, transaction: Transaction) -> Transaction:
        """Overwrite the editable fields; raises if the row is already gone."""
        stmt = (
            update(TransactionModel)
            .where(TransactionModel.id == transaction.id)
            .values(
                category_id=transaction.category_id,
                amount=transaction.amount,
                description=transaction.description,
                date=transaction.date,
                balance=transaction.balance,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        if result.rowcount != 1:
            raise TransactionNotFoundException(transaction.id)

        updated = await self.get_by_id(transaction.id)
        if updated is None:
            raise TransactionNotFoundException(transaction.id)
        return updated

    async def delete(self, transaction_id: int) -> None:
        result = await self._session.execute(
            delete(TransactionModel)
            .where(TransactionModel.id == transaction_id)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            raise TransactionNotFoundException(transaction_id)

    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        stmt = (
            select(TransactionModel)
            .where(TransactionModel.id == transaction_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def get_dto_by_id(self, transaction_id: int) -> Optional[TransactionDTO]:
        stmt = self._dto_query().where(TransactionModel.id == transaction_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_dto(model)

    async def list_by_account(
        self,
        account_token: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[Transaction]:
        stmt = self._filtered(select(TransactionModel), account_token, month, year)
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_dtos_by_account(
        self,
        account_token: str,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[TransactionDTO]:
        stmt = self._filtered(self._dto_query(), account_token, month, year)
        result = await self._session.execute(stmt)

        return [self._to_dto(model) for model in result.unique().scalars().all()]

    async def get_available_months(self, account_token: str) -> List[MonthYear]:
        year_col = extract("year", TransactionModel.date)
        month_col = extract("month", TransactionModel.date)
        stmt = (
            select(year_col.label("year"), month_col.label("month"), func.count().label("count"))
            .where(TransactionModel.account_token == account_token)
            .group_by(year_col, month_col)
            .order_by(year_col.desc(), month_col.desc())
        )
        result = await self._session.execute(stmt)

        return [
            MonthYear(year=int(year), month=int(month), count=int(count))
            for year, month, count in result.all()
        ]

    def _dto_query(self):
        return (
            select(TransactionModel)
            .options(
                joinedload(TransactionModel.category).joinedload(CategoryModel.transaction_type)
            )
            .execution_options(populate_existing=True)
        )

    def _filtered(self, stmt, account_token: str, month: Optional[int], year: Optional[int]):
        stmt = stmt.where(TransactionModel.account_token == account_token)
        if month is not None and year is not None:
            stmt = stmt.where(
                extract("month", TransactionModel.date) == month,
                extract("year", TransactionModel.date) == year,
            )
        return stmt.order_by(TransactionModel.date.desc(), TransactionModel.id.desc())

    def _to_entity(self, model: TransactionModel) -> Transaction:
        """Convert database model to domain entity."""
        return Transaction(
            id=model.id,
            account_token=model.account_token,
            category_id=model.category_id,
            amount=Decimal(model.amount),
            description=model.description,
            date=model.date,
            balance=Decimal(model.balance),
            created_at=model.created_at,
        )

    def _to_dto(self, model: TransactionModel) -> TransactionDTO:
        category = None
        if model.category is not None:
            type_model = model.category.transaction_type
            category = CategoryRef(
                id=model.category.id,
                category_name=model.category.category_name,
                color=model.category.color,
                transaction_type=(
                    TransactionTypeRef(
                        id=type_model.id,
                        type_name=type_model.type_name,
                        type_slug=type_model.type_slug,
                    )
                    if type_model is not None
                    else None
                ),
                created_at=model.category.created_at,
                updated_at=model.category.updated_at,
            )

        return TransactionDTO(
            id=model.id,
            account_token=model.account_token,
            amount=Decimal(model.amount),
            description=model.description,
            date=model.date,
            balance=Decimal(model.balance),
            created_at=model.created_at,
            category=category,
        )
