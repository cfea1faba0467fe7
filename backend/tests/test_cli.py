from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.cli import build_parser, print_report
from app.services.aggregation import CategoryFilter, DateRange, Granularity, parse_month


def _txn(description, amount, type_, category, day):
    return SimpleNamespace(
        description=description,
        amount=Decimal(amount),
        type=type_,
        category=category,
        date=day,
    )


RECORDS = [
    _txn("Salário", "1000.00", "income", "Salário", date(2024, 3, 5)),
    _txn("Feira", "250.00", "expense", "Alimentação", date(2024, 3, 10)),
    _txn("Aluguel", "900.00", "expense", "Moradia", date(2024, 4, 1)),
]


def test_print_report_for_month(capsys):
    print_report(RECORDS, parse_month("2024-03"))
    out = capsys.readouterr().out

    assert "Período:          março 2024" in out
    assert "Receitas:         R$ 1.000,00" in out
    assert "Despesas:         R$ 250,00" in out
    assert "Saldo:            R$ 750,00" in out
    assert "Taxa de economia: 75,0%" in out
    assert "Categorias:       2" in out
    assert "Moradia" not in out
    assert "100,0%" in out
    assert "mar 2024" in out
    assert "abr 2024" not in out


def test_print_report_daily_income(capsys):
    print_report(
        RECORDS,
        DateRange(),
        granularity=Granularity.DAILY,
        type_filter=CategoryFilter.INCOME,
    )
    out = capsys.readouterr().out

    assert "Todo o período" in out
    assert "Saldo:            -R$ 150,00" in out
    assert "Categorias (income)" in out
    assert "Evolução do saldo (daily)" in out
    for label in ("05/03", "10/03", "01/04"):
        assert label in out


def test_print_report_without_transactions(capsys):
    print_report([], DateRange(start=date(2024, 1, 1)))
    out = capsys.readouterr().out

    assert "desde 01/01/2024" in out
    assert "Taxa de economia: 0,0%" in out
    assert out.count("Nenhuma transação encontrada") == 2


def test_report_parser_defaults():
    args = build_parser().parse_args(["report", "--email", "ana@example.com"])
    assert args.month is None
    assert args.granularity == "monthly"
    assert args.type == "expense"


def test_report_parser_rejects_unknown_granularity():
    with pytest.raises(SystemExit):
        build_parser().parse_args(
            ["report", "--email", "ana@example.com", "--granularity", "weekly"]
        )


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
