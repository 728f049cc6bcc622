"""Transaction-related Pydantic schemas."""

import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wallet_ledger.domain.entities import CategoryRef, MonthYear, Transaction, TransactionDTO


class TransactionCreateSchema(BaseModel):
    """Schema for POST /v1/transactions request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "account_token": "acc-main",
                    "category_id": 1,
                    "amount": 150.25,
                    "description": "Salary",
                    "date": "2024-01-05",
                }
            ]
        }
    )

    account_token: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Token of the account the transaction belongs to",
    )
    category_id: int = Field(
        ...,
        gt=0,
        description="Category deciding whether the amount is a credit or a debit",
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=14,
        decimal_places=2,
        description="Positive amount; the sign comes from the category",
        examples=[150.25],
    )
    description: str = Field(
        "",
        max_length=255,
        description="Free text",
    )
    date: datetime.date = Field(
        ...,
        description="Calendar date of the movement (YYYY-MM-DD)",
    )

    @field_validator("account_token")
    @classmethod
    def validate_account_token(cls, v: str) -> str:
        """Ensure account_token is not just whitespace."""
        if not v.strip():
            raise ValueError("account_token cannot be empty or whitespace")
        return v.strip()


class TransactionUpdateSchema(BaseModel):
    """Schema for PUT /v1/transactions/{transaction_id} request body."""

    category_id: int = Field(..., gt=0)
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    description: str = Field("", max_length=255)
    date: datetime.date


class TransactionTypeSchema(BaseModel):
    id: int
    type_name: str
    type_slug: str


class CategorySchema(BaseModel):
    """Category embedded in a transaction."""

    id: int
    category_name: str
    color: str
    transaction_type: Optional[TransactionTypeSchema] = None

    @classmethod
    def from_entity(cls, category: CategoryRef) -> "CategorySchema":
        return cls(**category.to_dict())


class TransactionSchema(BaseModel):
    """A stored transaction, without category details."""

    id: int
    account_token: str
    category_id: int
    amount: float = Field(..., description="Positive magnitude")
    description: str
    date: str = Field(..., description="YYYY-MM-DD")
    balance: float = Field(..., description="Account balance right after this entry")
    created_at: Optional[str] = None

    @classmethod
    def from_entity(cls, transaction: Transaction) -> "TransactionSchema":
        return cls(**transaction.to_dict())


class TransactionDTOSchema(BaseModel):
    """A transaction joined with its category and transaction type."""

    id: int
    account_token: str
    amount: float
    description: str
    date: str
    balance: float
    created_at: Optional[str] = None
    category: Optional[CategorySchema] = None

    @classmethod
    def from_entity(cls, dto: TransactionDTO) -> "TransactionDTOSchema":
        return cls(
            id=dto.id,
            account_token=dto.account_token,
            amount=float(dto.amount),
            description=dto.description,
            date=dto.date.isoformat(),
            balance=float(dto.balance),
            created_at=dto.created_at.isoformat() if dto.created_at else None,
            category=CategorySchema.from_entity(dto.category) if dto.category else None,
        )


class MonthYearSchema(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    count: int = Field(..., ge=0)

    @classmethod
    def from_entity(cls, period: MonthYear) -> "MonthYearSchema":
        return cls(**period.to_dict())


class TransactionListResponseSchema(BaseModel):
    """Schema for GET /v1/transactions/{account_token} response."""

    account_token: str
    transactions: list[TransactionSchema] = Field(
        ...,
        description="Transactions ordered by date, newest first",
    )


class AvailableMonthsResponseSchema(BaseModel):
    """Schema for GET /v1/transactions/months/{account_token} response."""

    account_token: str
    months: list[MonthYearSchema] = Field(
        ...,
        description="Months holding at least one transaction, newest first",
    )


class TransactionChangeResponseSchema(BaseModel):
    """Response of create, update and delete."""

    transaction: TransactionDTOSchema
    account_balance: float = Field(..., description="Account balance after the change")
    months: list[MonthYearSchema]

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "transaction": {
                        "id": 42,
                        "account_token": "acc-main",
                        "amount": 150.25,
                        "description": "Salary",
                        "date": "2024-01-05",
                        "balance": 1150.25,
                        "created_at": "2024-01-05T10:00:00+00:00",
                        "category": {
                            "id": 1,
                            "category_name": "Salary",
                            "color": "#16a34a",
                            "transaction_type": {
                                "id": 1,
                                "type_name": "Credit",
                                "type_slug": "credit",
                            },
                        },
                    },
                    "account_balance": 1150.25,
                    "months": [{"year": 2024, "month": 1, "count": 1}],
                }
            ]
        }
    )

    @classmethod
    def from_change(cls, change) -> "TransactionChangeResponseSchema":
        return cls(
            transaction=TransactionDTOSchema.from_entity(change.transaction),
            account_balance=float(change.account_balance),
            months=[MonthYearSchema.from_entity(m) for m in change.months],
        )
