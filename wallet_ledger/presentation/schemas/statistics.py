"""Statistics and grouped-statement Pydantic schemas."""

from pydantic import BaseModel, Field

from wallet_ledger.domain.entities import (
    GroupedTransactions,
    TransactionStatistics,
    TransactionTotals,
)

from .transaction import TransactionDTOSchema


class TotalsSchema(BaseModel):
    credit: float = Field(..., ge=0, description="Sum of credit amounts")
    debit: float = Field(..., ge=0, description="Sum of debit amounts")
    difference: float = Field(..., description="credit - debit")

    @classmethod
    def from_entity(cls, totals: TransactionTotals) -> "TotalsSchema":
        return cls(**totals.to_dict())


class CategoryStatisticSchema(BaseModel):
    name: str
    count: int = Field(..., ge=1)
    total: float
    percentage: float = Field(..., description="Share of the credit or debit total")
    color: str


class DailyTotalSchema(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    total: float = Field(..., description="Net signed total of the day")


class TransactionStatisticsResponseSchema(BaseModel):
    """Schema for GET /v1/transactions/statistics/{account_token} response."""

    total_transactions: int = Field(..., ge=0)
    largest_credit: float = Field(..., ge=0)
    largest_debit: float = Field(..., ge=0)
    credit_category_breakdown: list[CategoryStatisticSchema]
    debit_category_breakdown: list[CategoryStatisticSchema]
    totals: TotalsSchema
    daily_totals: list[DailyTotalSchema] = Field(..., description="Oldest day first")
    start_date: str = Field(..., description="Empty when there is no data")
    end_date: str = Field(..., description="Empty when there is no data")

    @classmethod
    def from_entity(cls, stats: TransactionStatistics) -> "TransactionStatisticsResponseSchema":
        return cls(
            total_transactions=stats.total_transactions,
            largest_credit=float(stats.largest_credit),
            largest_debit=float(stats.largest_debit),
            credit_category_breakdown=[
                _category_stat(stat) for stat in stats.credit_category_breakdown
            ],
            debit_category_breakdown=[
                _category_stat(stat) for stat in stats.debit_category_breakdown
            ],
            totals=TotalsSchema.from_entity(stats.totals),
            daily_totals=[
                DailyTotalSchema(date=day.date, total=float(day.total))
                for day in stats.daily_totals
            ],
            start_date=stats.start_date,
            end_date=stats.end_date,
        )


def _category_stat(stat) -> CategoryStatisticSchema:
    return CategoryStatisticSchema(
        name=stat.name,
        count=stat.count,
        total=float(stat.total),
        percentage=float(stat.percentage),
        color=stat.color,
    )


class TransactionGroupSchema(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    transactions: list[TransactionDTOSchema]


class GroupedTransactionsResponseSchema(BaseModel):
    """Schema for GET /v1/transactions/dto/{account_token} response."""

    groups: list[TransactionGroupSchema] = Field(..., description="Most recent month first")
    totals: TotalsSchema

    @classmethod
    def from_entity(cls, grouped: GroupedTransactions) -> "GroupedTransactionsResponseSchema":
        return cls(
            groups=[
                TransactionGroupSchema(
                    year=group.year,
                    month=group.month,
                    transactions=[TransactionDTOSchema.from_entity(tx) for tx in group.transactions],
                )
                for group in grouped.groups
            ],
            totals=TotalsSchema.from_entity(grouped.totals),
        )
