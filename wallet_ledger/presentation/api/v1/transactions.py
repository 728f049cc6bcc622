"""Transaction API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query

from wallet_ledger.application.dto import CreateTransactionRequest, UpdateTransactionRequest
from wallet_ledger.application.services import LedgerService, StatementService
from wallet_ledger.core.dependencies import (
    get_current_user_id,
    get_ledger_service,
    get_statement_service,
)
from wallet_ledger.presentation.schemas import (
    AvailableMonthsResponseSchema,
    ErrorResponseSchema,
    GroupedTransactionsResponseSchema,
    MonthYearSchema,
    TransactionChangeResponseSchema,
    TransactionCreateSchema,
    TransactionListResponseSchema,
    TransactionSchema,
    TransactionStatisticsResponseSchema,
    TransactionUpdateSchema,
)

transactions_router = APIRouter(
    prefix="/transactions",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        403: {"model": ErrorResponseSchema, "description": "Account belongs to another user"},
        404: {"model": ErrorResponseSchema, "description": "Account, category or transaction not found"},
    },
)

UserId = Annotated[int, Depends(get_current_user_id)]
Ledger = Annotated[LedgerService, Depends(get_ledger_service)]
Statements = Annotated[StatementService, Depends(get_statement_service)]
AccountToken = Annotated[str, Path(min_length=1, max_length=64, description="Account token")]
TransactionId = Annotated[int, Path(gt=0, description="Transaction id")]
Month = Annotated[Optional[int], Query(description="Month filter (1-12), requires year")]
Year = Annotated[Optional[int], Query(description="Year filter, requires month")]

MUTATION_RESPONSES = {
    409: {"model": ErrorResponseSchema, "description": "Account kept changing concurrently"},
    422: {"model": ErrorResponseSchema, "description": "Transfer categories are not supported"},
}


@transactions_router.post(
    "",
    response_model=TransactionChangeResponseSchema,
    status_code=201,
    summary="Create Transaction",
    description="Record a transaction and apply it to the account balance.",
    responses=MUTATION_RESPONSES,
)
async def create_transaction(
    request: TransactionCreateSchema,
    user_id: UserId,
    ledger: Ledger,
) -> TransactionChangeResponseSchema:
    change = await ledger.create_and_return(
        user_id,
        CreateTransactionRequest(
            account_token=request.account_token,
            category_id=request.category_id,
            amount=request.amount,
            description=request.description,
            date=request.date,
        ),
    )
    return TransactionChangeResponseSchema.from_change(change)


@transactions_router.put(
    "/{transaction_id}",
    response_model=TransactionChangeResponseSchema,
    summary="Update Transaction",
    description="""
    Edit a transaction. The account balance moves by the difference
    between the new and the old signed amount.
    """,
    responses=MUTATION_RESPONSES,
)
async def update_transaction(
    transaction_id: TransactionId,
    request: TransactionUpdateSchema,
    user_id: UserId,
    ledger: Ledger,
) -> TransactionChangeResponseSchema:
    change = await ledger.update_and_return(
        user_id,
        UpdateTransactionRequest(
            transaction_id=transaction_id,
            amount=request.amount,
            category_id=request.category_id,
            description=request.description,
            date=request.date,
        ),
    )
    return TransactionChangeResponseSchema.from_change(change)


@transactions_router.delete(
    "/{transaction_id}",
    response_model=TransactionChangeResponseSchema,
    summary="Delete Transaction",
    description="Remove a transaction and reverse its effect on the account balance.",
    responses=MUTATION_RESPONSES,
)
async def delete_transaction(
    transaction_id: TransactionId,
    user_id: UserId,
    ledger: Ledger,
) -> TransactionChangeResponseSchema:
    change = await ledger.delete_and_return(user_id, transaction_id)
    return TransactionChangeResponseSchema.from_change(change)


@transactions_router.get(
    "/dto/{account_token}",
    response_model=GroupedTransactionsResponseSchema,
    summary="Get Statement By Month",
    description="""
    Transactions joined with their categories, grouped by calendar month
    (most recent first), with credit and debit totals.
    """,
)
async def get_grouped_transactions(
    account_token: AccountToken,
    user_id: UserId,
    statements: Statements,
    month: Month = None,
    year: Year = None,
) -> GroupedTransactionsResponseSchema:
    grouped = await statements.get_grouped_transactions(user_id, account_token, month, year)
    return GroupedTransactionsResponseSchema.from_entity(grouped)


@transactions_router.get(
    "/statistics/{account_token}",
    response_model=TransactionStatisticsResponseSchema,
    summary="Get Statistics",
    description="Totals, largest amounts, category breakdowns and daily totals.",
)
async def get_statistics(
    account_token: AccountToken,
    user_id: UserId,
    statements: Statements,
    month: Month = None,
    year: Year = None,
) -> TransactionStatisticsResponseSchema:
    stats = await statements.get_statistics(user_id, account_token, month, year)
    return TransactionStatisticsResponseSchema.from_entity(stats)


@transactions_router.get(
    "/months/{account_token}",
    response_model=AvailableMonthsResponseSchema,
    summary="Get Available Months",
)
async def get_available_months(
    account_token: AccountToken,
    user_id: UserId,
    statements: Statements,
) -> AvailableMonthsResponseSchema:
    months = await statements.get_available_months(user_id, account_token)
    return AvailableMonthsResponseSchema(
        account_token=account_token,
        months=[MonthYearSchema.from_entity(m) for m in months],
    )


@transactions_router.get(
    "/{account_token}",
    response_model=TransactionListResponseSchema,
    summary="List Transactions",
    description="Raw transactions of an account, newest first.",
)
async def list_transactions(
    account_token: AccountToken,
    user_id: UserId,
    statements: Statements,
    month: Month = None,
    year: Year = None,
) -> TransactionListResponseSchema:
    transactions = await statements.get_transactions(user_id, account_token, month, year)
    return TransactionListResponseSchema(
        account_token=account_token,
        transactions=[TransactionSchema.from_entity(tx) for tx in transactions],
    )
