from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_cache, get_current_user, get_date_range
from app.cache import QueryCache
from app.database import get_db
from app.models.transaction import Transaction, TransactionType
from app.models.user import User
from app.schemas.transaction import (
    TransactionCreate,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)
from app.services import transaction_service
from app.services.aggregation import DateRange, distinct_categories
from app.services.transaction_service import TransactionStoreError

router = APIRouter(prefix="/transactions", tags=["transactions"])

STORE_UNAVAILABLE = "Could not reach the transaction store, please try again"


def _store_unavailable() -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=STORE_UNAVAILABLE)


async def _get_owned(db: AsyncSession, user: User, transaction_id: uuid.UUID) -> Transaction:
    try:
        txn = await transaction_service.get_transaction(db, user.id, transaction_id)
    except TransactionStoreError as exc:
        raise _store_unavailable() from exc
    if txn is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=500),
    type: TransactionType | None = None,
    category: str | None = None,
    search: str | None = Query(None, min_length=1),
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        transactions, total = await transaction_service.list_page(
            db,
            current_user.id,
            page=page,
            per_page=per_page,
            type=type,
            category=category,
            search=search,
            date_range=date_range,
        )
    except TransactionStoreError as exc:
        raise _store_unavailable() from exc

    return {
        "data": [TransactionResponse.model_validate(t) for t in transactions],
        "total": total,
    }


@router.get("/categories", response_model=dict)
async def list_categories(
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        records = await transaction_service.fetch_all(db, current_user.id, cache)
    except TransactionStoreError as exc:
        raise _store_unavailable() from exc
    categories = distinct_categories(records)
    return {"data": categories, "total": len(categories)}


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    body: TransactionCreate,
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        txn = await transaction_service.create_transaction(db, current_user.id, body, cache)
    except TransactionStoreError as exc:
        raise _store_unavailable() from exc
    return {"data": TransactionResponse.model_validate(txn)}


@router.get("/{transaction_id}", response_model=dict)
async def get_transaction(
    transaction_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    txn = await _get_owned(db, current_user, transaction_id)
    return {"data": TransactionResponse.model_validate(txn)}


@router.patch("/{transaction_id}", response_model=dict)
async def update_transaction(
    transaction_id: uuid.UUID,
    body: TransactionUpdate,
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
    current_user: User = Depends(get_current_user),
) -> dict:
    txn = await _get_owned(db, current_user, transaction_id)
    try:
        txn = await transaction_service.update_transaction(db, txn, body, cache)
    except TransactionStoreError as exc:
        raise _store_unavailable() from exc
    return {"data": TransactionResponse.model_validate(txn)}


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
    current_user: User = Depends(get_current_user),
) -> None:
    txn = await _get_owned(db, current_user, transaction_id)
    try:
        await transaction_service.delete_transaction(db, txn, cache)
    except TransactionStoreError as exc:
        raise _store_unavailable() from exc
