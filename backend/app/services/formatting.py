"""Brazilian Portuguese display helpers for amounts and calendar labels."""

from __future__ import annotations

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

MONTH_NAMES = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

_CENTS = Decimal("0.01")


def format_brl(value: Decimal | int | float) -> str:
    """Format ``value`` as Brazilian reais, e.g. ``R$ 1.234,56``."""
    amount = Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    integer, _, fraction = f"{abs(amount):.2f}".partition(".")

    groups = []
    while len(integer) > 3:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    groups.insert(0, integer)

    return f"{sign}R$ {'.'.join(groups)},{fraction}"


def format_percentage(value: float) -> str:
    return f"{value:.1f}%".replace(".", ",")


def day_label(day: date) -> str:
    return day.strftime("%d/%m")


def day_full_label(day: date) -> str:
    return f"{day.day:02d} de {MONTH_NAMES[day.month - 1]} de {day.year}"


def month_label(day: date) -> str:
    return f"{MONTH_NAMES[day.month - 1][:3]} {day.year}"


def month_long_label(day: date) -> str:
    return f"{MONTH_NAMES[day.month - 1]} {day.year}"


def period_label(start: date | None, end: date | None) -> str:
    """Describe a reporting period the way the charts page titles it."""
    if start is None and end is None:
        return "Todo o período"
    if (
        start is not None
        and end is not None
        and start.day == 1
        and (start.year, start.month) == (end.year, end.month)
        and end.day == calendar.monthrange(end.year, end.month)[1]
    ):
        return month_long_label(start)
    if start is None:
        return f"até {end:%d/%m/%Y}"
    if end is None:
        return f"desde {start:%d/%m/%Y}"
    return f"{start:%d/%m/%Y} a {end:%d/%m/%Y}"
