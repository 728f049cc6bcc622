"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends, Header

from wallet_ledger.application.services import LedgerService, StatementService
from wallet_ledger.domain.interfaces import UnitOfWorkFactory
from wallet_ledger.infrastructure.database import DatabaseSessionManager, db_manager
from wallet_ledger.infrastructure.database.unit_of_work import sqlalchemy_uow_factory


# Database dependencies
def get_database() -> DatabaseSessionManager:
    return db_manager


def get_unit_of_work_factory() -> UnitOfWorkFactory:
    """Get a factory producing one SqlAlchemyUnitOfWork per call."""
    return sqlalchemy_uow_factory(db_manager.sessionmaker)


# Caller identity, set by the upstream gateway after authentication
def get_current_user_id(
    x_user_id: Annotated[int, Header(alias="X-User-Id", gt=0)],
) -> int:
    """Get the acting user's id."""
    return x_user_id


# Service dependencies
def get_ledger_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_unit_of_work_factory)],
) -> LedgerService:
    """Get a LedgerService instance."""
    return LedgerService(uow_factory)


def get_statement_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_unit_of_work_factory)],
) -> StatementService:
    """Get a StatementService instance."""
    return StatementService(uow_factory)
