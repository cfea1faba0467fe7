from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_cache, get_current_user, get_date_range
from app.cache import QueryCache
from app.database import get_db
from app.models.user import User
from app.schemas.dashboard import DashboardSummary, SummaryTotalsResponse, TimeBucketResponse
from app.services import transaction_service
from app.services.aggregation import DateRange, Granularity, bucket_transactions, summarize
from app.services.transaction_service import TransactionStoreError

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=dict)
async def summary(
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        records = await transaction_service.fetch_in_range(
            db, current_user.id, cache, date_range
        )
    except TransactionStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not load dashboard data, please try again",
        ) from exc

    monthly = bucket_transactions(records, Granularity.MONTHLY)
    return {
        "data": DashboardSummary(
            totals=SummaryTotalsResponse.model_validate(summarize(records)),
            monthly=[TimeBucketResponse.from_bucket(b) for b in monthly],
        )
    }
