"""Derived views over a user's transaction list.

Everything here is a pure function of its input: the dashboard, the charts
endpoints and the CLI report fetch the user's transactions once, narrow them
with :func:`filter_by_date_range` and feed the result to

* :func:`bucket_transactions`: daily or monthly income/expense buckets with a
  running balance,
* :func:`aggregate_by_category`: per-category totals and percentages,
* :func:`summarize`: headline totals and savings rate.

Inputs are any objects exposing ``description``, ``amount``, ``type``,
``category`` and ``date`` (ORM rows, ``TransactionResponse`` models, ...).
``date`` may be a :class:`datetime.date` or a ``YYYY-MM-DD`` string. None of
these functions raise on bad records: a malformed date is logged and counted
on today's date, an unreadable amount counts as zero.
"""

from __future__ import annotations

import calendar
import enum
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol, TypeVar

from app.models.transaction import TransactionType
from app.services.formatting import day_full_label, day_label, month_label

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
DETAIL_PREVIEW_LIMIT = 3


class Granularity(str, enum.Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


class CategoryFilter(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"
    ALL = "all"


class TransactionLike(Protocol):
    description: str
    amount: Any
    type: Any
    category: str
    date: Any


T = TypeVar("T", bound=TransactionLike)


@dataclass
class TransactionDetail:
    description: str
    amount: Decimal


@dataclass
class TimeBucket:
    start: date
    label: str
    full_label: str
    income: Decimal = ZERO
    expense: Decimal = ZERO
    balance: Decimal = ZERO
    income_transactions: list[TransactionDetail] = field(default_factory=list)
    expense_transactions: list[TransactionDetail] = field(default_factory=list)

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    def preview(
        self, kind: TransactionType, limit: int = DETAIL_PREVIEW_LIMIT
    ) -> tuple[list[TransactionDetail], int]:
        """Return the first ``limit`` details of one side and how many were left out."""
        details = (
            self.income_transactions
            if kind == TransactionType.INCOME
            else self.expense_transactions
        )
        return details[:limit], max(len(details) - limit, 0)


@dataclass
class CategoryTotal:
    name: str
    total: Decimal = ZERO
    percentage: float = 0.0
    transaction_count: int = 0


@dataclass(frozen=True)
class SummaryTotals:
    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    savings_rate: float
    category_count: int
    transaction_count: int


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar range; a missing end is unbounded on that side."""

    start: date | None = None
    end: date | None = None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def __contains__(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


# ---------------------------------------------------------------------------
# Record helpers
# ---------------------------------------------------------------------------


def parse_transaction_date(value: date | str) -> date:
    """Resolve a transaction date without any timezone conversion.

    Strings are split into year, month and day components and built into a
    plain calendar date, so ``"2024-01-05"`` is always the 5th of January.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        year, month, day = (int(part) for part in str(value).strip().split("-"))
        return date(year, month, day)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Malformed transaction date %r, counting it on today", value)
        return date.today()


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        logger.warning("Unreadable transaction amount %r, counting it as zero", value)
        return ZERO


def transaction_kind(txn: TransactionLike) -> TransactionType:
    # Anything that is not income is treated as an expense
    if txn.type == TransactionType.INCOME:
        return TransactionType.INCOME
    return TransactionType.EXPENSE


# ---------------------------------------------------------------------------
# Date-range filtering
# ---------------------------------------------------------------------------


def month_range(year: int, month: int) -> DateRange:
    last_day = calendar.monthrange(year, month)[1]
    return DateRange(start=date(year, month, 1), end=date(year, month, last_day))


def parse_month(value: str) -> DateRange:
    """Parse ``YYYY-MM`` into the range covering that calendar month.

    Raises ``ValueError`` for anything else.
    """
    try:
        year_text, month_text = value.strip().split("-")
        year, month = int(year_text), int(month_text)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid month {value!r}, expected YYYY-MM") from None
    if not 1 <= month <= 12 or year < 1:
        raise ValueError(f"Invalid month {value!r}, expected YYYY-MM")
    return month_range(year, month)


def filter_by_date_range(
    transactions: Sequence[T], date_range: DateRange | None
) -> Sequence[T]:
    """Keep transactions dated inside ``date_range`` (inclusive on both ends).

    An unbounded range returns ``transactions`` itself.
    """
    if date_range is None or date_range.is_unbounded:
        return transactions
    return [t for t in transactions if parse_transaction_date(t.date) in date_range]


# ---------------------------------------------------------------------------
# Temporal bucketing
# ---------------------------------------------------------------------------


def bucket_start(day: date, granularity: Granularity) -> date:
    if granularity is Granularity.MONTHLY:
        return day.replace(day=1)
    return day


def _new_bucket(start: date, granularity: Granularity) -> TimeBucket:
    if granularity is Granularity.MONTHLY:
        label = month_label(start)
        return TimeBucket(start=start, label=label, full_label=label)
    return TimeBucket(start=start, label=day_label(start), full_label=day_full_label(start))


def bucket_transactions(
    transactions: Iterable[TransactionLike],
    granularity: Granularity | str = Granularity.DAILY,
) -> list[TimeBucket]:
    """Group transactions into chronologically ordered buckets.

    Totals are accumulated per bucket first; the running balance is then
    computed as a prefix sum over the buckets sorted by their start date.
    """
    granularity = Granularity(granularity)

    dated = sorted(
        ((parse_transaction_date(t.date), t) for t in transactions),
        key=lambda pair: pair[0],
    )

    buckets: dict[date, TimeBucket] = {}
    for day, txn in dated:
        start = bucket_start(day, granularity)
        bucket = buckets.get(start)
        if bucket is None:
            bucket = buckets[start] = _new_bucket(start, granularity)

        amount = _as_decimal(txn.amount)
        detail = TransactionDetail(description=txn.description, amount=amount)
        if transaction_kind(txn) is TransactionType.INCOME:
            bucket.income += amount
            bucket.income_transactions.append(detail)
        else:
            bucket.expense += amount
            bucket.expense_transactions.append(detail)

    ordered = sorted(buckets.values(), key=lambda b: b.start)
    running = ZERO
    for bucket in ordered:
        running += bucket.net
        bucket.balance = running
    return ordered


# ---------------------------------------------------------------------------
# Category aggregation
# ---------------------------------------------------------------------------


def aggregate_by_category(
    transactions: Iterable[TransactionLike],
    type_filter: CategoryFilter | str = CategoryFilter.EXPENSE,
) -> list[CategoryTotal]:
    """Sum amounts per category for one transaction type, or for all of them.

    Categories are matched exactly (case-sensitive). The result is ordered by
    total, largest first; equal totals keep first-seen order.
    """
    type_filter = CategoryFilter(type_filter)

    totals: dict[str, CategoryTotal] = {}
    for txn in transactions:
        if (
            type_filter is not CategoryFilter.ALL
            and transaction_kind(txn).value != type_filter.value
        ):
            continue
        entry = totals.get(txn.category)
        if entry is None:
            entry = totals[txn.category] = CategoryTotal(name=txn.category)
        entry.total += _as_decimal(txn.amount)
        entry.transaction_count += 1

    grand_total = sum((c.total for c in totals.values()), ZERO)
    for entry in totals.values():
        entry.percentage = float(entry.total / grand_total * 100) if grand_total > 0 else 0.0

    return sorted(totals.values(), key=lambda c: c.total, reverse=True)


# ---------------------------------------------------------------------------
# Summary totals
# ---------------------------------------------------------------------------


def distinct_categories(transactions: Iterable[TransactionLike]) -> list[str]:
    return sorted({t.category for t in transactions})


def summarize(transactions: Iterable[TransactionLike]) -> SummaryTotals:
    """Headline totals for a (possibly date-filtered) transaction list.

    The savings rate is a percentage of total income and is ``0`` when there
    is no income. A net loss yields a negative rate.
    """
    total_income = ZERO
    total_expense = ZERO
    categories: set[str] = set()
    count = 0

    for txn in transactions:
        amount = _as_decimal(txn.amount)
        if transaction_kind(txn) is TransactionType.INCOME:
            total_income += amount
        else:
            total_expense += amount
        categories.add(txn.category)
        count += 1

    net_balance = total_income - total_expense
    savings_rate = float(net_balance / total_income * 100) if total_income > 0 else 0.0

    return SummaryTotals(
        total_income=total_income,
        total_expense=total_expense,
        net_balance=net_balance,
        savings_rate=savings_rate,
        category_count=len(categories),
        transaction_count=count,
    )
