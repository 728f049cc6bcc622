"""Reference data the ledger depends on."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wallet_ledger.domain.entities import TransactionKind

from .models import TransactionTypeModel


async def seed_transaction_types(session: AsyncSession) -> None:
    """Insert the credit/debit/transfer rows that are missing."""
    result = await session.execute(select(TransactionTypeModel.id))
    existing = set(result.scalars().all())

    for kind in TransactionKind:
        if kind.value in existing:
            continue
        session.add(
            TransactionTypeModel(
                id=kind.value,
                type_name=kind.name.title(),
                type_slug=kind.slug,
            )
        )

    await session.flush()
