from __future__ import annotations

from collections.abc import Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_cache, get_current_user, get_date_range
from app.cache import QueryCache
from app.database import get_db
from app.models.user import User
from app.schemas.dashboard import (
    CategoryBreakdown,
    CategoryTotalResponse,
    ChartsOverview,
    SummaryTotalsResponse,
    TimeBucketResponse,
)
from app.schemas.transaction import TransactionResponse
from app.services import transaction_service
from app.services.aggregation import (
    ZERO,
    CategoryFilter,
    DateRange,
    Granularity,
    aggregate_by_category,
    bucket_transactions,
    summarize,
)
from app.services.formatting import period_label
from app.services.transaction_service import TransactionStoreError

router = APIRouter(prefix="/charts", tags=["charts"])


async def _load(
    db: AsyncSession, user: User, cache: QueryCache, date_range: DateRange
) -> Sequence[TransactionResponse]:
    try:
        return await transaction_service.fetch_in_range(db, user.id, cache, date_range)
    except TransactionStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not load chart data, please try again",
        ) from exc


def _breakdown(
    records: Sequence[TransactionResponse], type_filter: CategoryFilter
) -> CategoryBreakdown:
    categories = aggregate_by_category(records, type_filter)
    return CategoryBreakdown(
        type=type_filter.value,
        total=sum((c.total for c in categories), ZERO),
        categories=[CategoryTotalResponse.model_validate(c) for c in categories],
    )


@router.get("/overview", response_model=dict)
async def overview(
    granularity: Granularity = Query(Granularity.DAILY),
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
    current_user: User = Depends(get_current_user),
) -> dict:
    records = await _load(db, current_user, cache, date_range)
    buckets = bucket_transactions(records, granularity)
    return {
        "data": ChartsOverview(
            period_label=period_label(date_range.start, date_range.end),
            granularity=granularity,
            totals=SummaryTotalsResponse.model_validate(summarize(records)),
            income_by_category=_breakdown(records, CategoryFilter.INCOME),
            expense_by_category=_breakdown(records, CategoryFilter.EXPENSE),
            balance_evolution=[TimeBucketResponse.from_bucket(b) for b in buckets],
        )
    }


@router.get("/categories", response_model=dict)
async def categories(
    type: CategoryFilter = Query(CategoryFilter.EXPENSE),
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
    current_user: User = Depends(get_current_user),
) -> dict:
    records = await _load(db, current_user, cache, date_range)
    return {"data": _breakdown(records, type)}


@router.get("/balance", response_model=dict)
async def balance(
    granularity: Granularity = Query(Granularity.DAILY),
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
    current_user: User = Depends(get_current_user),
) -> dict:
    records = await _load(db, current_user, cache, date_range)
    buckets = bucket_transactions(records, granularity)
    return {
        "data": [TimeBucketResponse.from_bucket(b) for b in buckets],
        "total": len(buckets),
    }
