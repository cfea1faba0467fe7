from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import func as sql_func
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import QueryCache, transactions_key
from app.models.transaction import Transaction, TransactionType
from app.schemas.transaction import TransactionCreate, TransactionResponse, TransactionUpdate
from app.services.aggregation import DateRange, filter_by_date_range

logger = logging.getLogger(__name__)


class TransactionStoreError(Exception):
    """The transaction store could not complete a read or write."""


async def fetch_all(
    db: AsyncSession, user_id: uuid.UUID, cache: QueryCache
) -> list[TransactionResponse]:
    """Return every transaction of ``user_id``, newest date first.

    Results are cached per user until a mutation invalidates them.
    """
    key = transactions_key(user_id)
    cached = cache.get(key)
    if cached is not None:
        return list(cached)

    stmt = (
        select(Transaction)
        .where(Transaction.user_id == user_id)
        .order_by(Transaction.date.desc(), Transaction.created_at.desc())
    )
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch transactions for user %s", user_id)
        raise TransactionStoreError("Could not load transactions") from exc

    records = [TransactionResponse.model_validate(t) for t in result.scalars().all()]
    cache.set(key, records)
    return list(records)


async def get_transaction(
    db: AsyncSession, user_id: uuid.UUID, transaction_id: uuid.UUID
) -> Transaction | None:
    stmt = select(Transaction).where(
        Transaction.id == transaction_id,
        Transaction.user_id == user_id,
    )
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.exception("Failed to load transaction %s for user %s", transaction_id, user_id)
        raise TransactionStoreError("Could not load transaction") from exc
    return result.scalar_one_or_none()


async def _commit(db: AsyncSession, action: str, user_id: uuid.UUID) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Failed to %s transaction for user %s", action, user_id)
        raise TransactionStoreError(f"Could not {action} transaction") from exc


async def create_transaction(
    db: AsyncSession, user_id: uuid.UUID, body: TransactionCreate, cache: QueryCache
) -> Transaction:
    txn = Transaction(user_id=user_id, **body.model_dump())
    db.add(txn)
    await _commit(db, "create", user_id)
    cache.invalidate(transactions_key(user_id))
    await db.refresh(txn)
    logger.info("Created %s transaction %s for user %s", txn.type.value, txn.id, user_id)
    return txn


async def update_transaction(
    db: AsyncSession, txn: Transaction, body: TransactionUpdate, cache: QueryCache
) -> Transaction:
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(txn, field, value)

    await _commit(db, "update", txn.user_id)
    cache.invalidate(transactions_key(txn.user_id))
    await db.refresh(txn)
    return txn


async def delete_transaction(db: AsyncSession, txn: Transaction, cache: QueryCache) -> None:
    txn_id, user_id = txn.id, txn.user_id
    await db.delete(txn)
    await _commit(db, "delete", user_id)
    cache.invalidate(transactions_key(user_id))
    logger.info("Deleted transaction %s for user %s", txn_id, user_id)


async def fetch_in_range(
    db: AsyncSession, user_id: uuid.UUID, cache: QueryCache, date_range: DateRange | None
) -> Sequence[TransactionResponse]:
    records = await fetch_all(db, user_id, cache)
    return filter_by_date_range(records, date_range)


async def list_page(
    db: AsyncSession,
    user_id: uuid.UUID,
    *,
    page: int = 1,
    per_page: int = 50,
    type: TransactionType | None = None,
    category: str | None = None,
    search: str | None = None,
    date_range: DateRange | None = None,
) -> tuple[list[Transaction], int]:
    """Return one page of filtered transactions and the unpaginated match count."""
    filters = [Transaction.user_id == user_id]
    if type is not None:
        filters.append(Transaction.type == type)
    if category is not None:
        filters.append(Transaction.category == category)
    if date_range is not None and date_range.start is not None:
        filters.append(Transaction.date >= date_range.start)
    if date_range is not None and date_range.end is not None:
        filters.append(Transaction.date <= date_range.end)
    if search is not None:
        pattern = f"%{search}%"
        filters.append(
            Transaction.description.ilike(pattern) | Transaction.category.ilike(pattern)
        )

    count_stmt = select(sql_func.count()).select_from(Transaction).where(*filters)
    stmt = (
        select(Transaction)
        .where(*filters)
        .order_by(Transaction.date.desc(), Transaction.created_at.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    try:
        total = (await db.execute(count_stmt)).scalar() or 0
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.exception("Failed to list transactions for user %s", user_id)
        raise TransactionStoreError("Could not list transactions") from exc
    return list(result.scalars().all()), total
