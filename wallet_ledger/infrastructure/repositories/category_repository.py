"""SQLAlchemy implementation of CategoryRepository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wallet_ledger.domain.entities import Category
from wallet_ledger.domain.interfaces import CategoryRepository
from wallet_ledger.infrastructure.database.models import CategoryModel


class SqlAlchemyCategoryRepository(CategoryRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, category_id: int, user_id: int) -> Optional[Category]:
        """Retrieve a category owned by user_id, soft-deleted ones included."""
        stmt = select(CategoryModel).where(
            CategoryModel.id == category_id,
            CategoryModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def add(self, category: Category) -> Category:
        model = CategoryModel(
            user_id=category.user_id,
            transaction_type_id=category.transaction_type_id,
            category_name=category.category_name,
            color=category.color,
            deleted_at=category.deleted_at,
        )
        self._session.add(model)
        await self._session.flush()

        return self._to_entity(model)

    def _to_entity(self, model: CategoryModel) -> Category:
        return Category(
            id=model.id,
            user_id=model.user_id,
            transaction_type_id=model.transaction_type_id,
            category_name=model.category_name,
            color=model.color,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at,
        )
