from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from app.services.formatting import (
    day_full_label,
    day_label,
    format_brl,
    format_percentage,
    month_label,
    month_long_label,
    period_label,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("0"), "R$ 0,00"),
        (Decimal("5.5"), "R$ 5,50"),
        (Decimal("999.99"), "R$ 999,99"),
        (Decimal("1234.56"), "R$ 1.234,56"),
        (Decimal("1234567.891"), "R$ 1.234.567,89"),
        (Decimal("-250"), "-R$ 250,00"),
        (1000, "R$ 1.000,00"),
        (0.125, "R$ 0,13"),
    ],
)
def test_format_brl(value, expected):
    assert format_brl(value) == expected


def test_format_percentage():
    assert format_percentage(75.0) == "75,0%"
    assert format_percentage(-12.345) == "-12,3%"


def test_calendar_labels():
    day = date(2024, 3, 7)
    assert day_label(day) == "07/03"
    assert day_full_label(day) == "07 de março de 2024"
    assert month_label(day) == "mar 2024"
    assert month_long_label(day) == "março 2024"


def test_period_label():
    assert period_label(None, None) == "Todo o período"
    assert period_label(date(2024, 2, 1), date(2024, 2, 29)) == "fevereiro 2024"
    assert period_label(date(2024, 2, 1), date(2024, 2, 10)) == "01/02/2024 a 10/02/2024"
    assert period_label(date(2024, 2, 1), None) == "desde 01/02/2024"
    assert period_label(None, date(2024, 2, 10)) == "até 10/02/2024"


def test_period_label_at_end_of_calendar():
    assert period_label(date(9999, 12, 1), date(9999, 12, 31)) == "dezembro 9999"
    assert period_label(date(9999, 11, 1), date.max) == "01/11/9999 a 31/12/9999"
