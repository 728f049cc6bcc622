"""
Fixtures for integration tests.

Provides:
- In-memory SQLite database with the schema, transaction types and a
  small set of accounts and categories
- Test client for the FastAPI app wired to that database
- Helpers to read balances straight from the database
"""

from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from wallet_ledger.core.dependencies import get_unit_of_work_factory
from wallet_ledger.infrastructure.database import AccountModel, Base, make_sessionmaker
from wallet_ledger.infrastructure.database.unit_of_work import sqlalchemy_uow_factory
from wallet_ledger.main import app

from ledger_data import ACCOUNT, GROCERIES, SALARY, seed_ledger_data


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory over the seeded test database."""
    factory = make_sessionmaker(test_engine)
    await seed_ledger_data(factory)
    return factory


@pytest.fixture
def uow_factory(session_factory):
    return sqlalchemy_uow_factory(session_factory)


@pytest.fixture
def read_balance(session_factory):
    """Read an account balance straight from the database."""

    async def read(token: str = ACCOUNT) -> Decimal:
        async with session_factory() as session:
            result = await session.execute(select(AccountModel.balance).where(AccountModel.token == token))
            return Decimal(result.scalar_one())

    return read


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(uow_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the in-memory database.

    The lifespan is not run, so the global session manager stays
    uninitialized; every unit of work goes through the override.
    """
    app.dependency_overrides[get_unit_of_work_factory] = lambda: uow_factory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def salary_payload() -> dict:
    return {
        "account_token": ACCOUNT,
        "category_id": SALARY,
        "amount": 100,
        "description": "January salary",
        "date": "2024-01-05",
    }


@pytest.fixture
def groceries_payload() -> dict:
    return {
        "account_token": ACCOUNT,
        "category_id": GROCERIES,
        "amount": 50.25,
        "description": "Market",
        "date": "2024-01-20",
    }
