from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel

from app.models.transaction import TransactionType
from app.services.aggregation import DETAIL_PREVIEW_LIMIT, Granularity, TimeBucket


class TransactionDetailResponse(BaseModel):
    description: str
    amount: Decimal

    model_config = {"from_attributes": True}


class TimeBucketResponse(BaseModel):
    start: dt.date
    label: str
    full_label: str
    income: Decimal
    expense: Decimal
    balance: Decimal
    # Capped to the first few entries; *_overflow counts the rest
    income_transactions: list[TransactionDetailResponse]
    income_overflow: int
    expense_transactions: list[TransactionDetailResponse]
    expense_overflow: int

    @classmethod
    def from_bucket(
        cls, bucket: TimeBucket, limit: int = DETAIL_PREVIEW_LIMIT
    ) -> TimeBucketResponse:
        income_details, income_overflow = bucket.preview(TransactionType.INCOME, limit)
        expense_details, expense_overflow = bucket.preview(TransactionType.EXPENSE, limit)
        return cls(
            start=bucket.start,
            label=bucket.label,
            full_label=bucket.full_label,
            income=bucket.income,
            expense=bucket.expense,
            balance=bucket.balance,
            income_transactions=[
                TransactionDetailResponse.model_validate(d) for d in income_details
            ],
            income_overflow=income_overflow,
            expense_transactions=[
                TransactionDetailResponse.model_validate(d) for d in expense_details
            ],
            expense_overflow=expense_overflow,
        )


class CategoryTotalResponse(BaseModel):
    name: str
    total: Decimal
    percentage: float
    transaction_count: int

    model_config = {"from_attributes": True}


class SummaryTotalsResponse(BaseModel):
    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    savings_rate: float
    category_count: int
    transaction_count: int

    model_config = {"from_attributes": True}


class DashboardSummary(BaseModel):
    totals: SummaryTotalsResponse
    monthly: list[TimeBucketResponse]


class CategoryBreakdown(BaseModel):
    type: str
    total: Decimal
    categories: list[CategoryTotalResponse]


class ChartsOverview(BaseModel):
    period_label: str
    granularity: Granularity
    totals: SummaryTotalsResponse
    income_by_category: CategoryBreakdown
    expense_by_category: CategoryBreakdown
    balance_evolution: list[TimeBucketResponse]
