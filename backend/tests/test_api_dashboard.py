from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.transaction import Transaction, TransactionType


async def _seed(db: AsyncSession, user_id: uuid.UUID) -> None:
    rows = [
        ("Salário", "Salário", TransactionType.INCOME, "1000.00", date(2024, 1, 5)),
        ("Restaurante", "Alimentação", TransactionType.EXPENSE, "200.00", date(2024, 1, 5)),
        ("Aluguel", "Moradia", TransactionType.EXPENSE, "300.00", date(2024, 2, 10)),
    ]
    db.add_all(
        Transaction(
            user_id=user_id,
            description=description,
            category=category,
            type=kind,
            amount=Decimal(amount),
            date=day,
        )
        for description, category, kind, amount, day in rows
    )
    await db.commit()


async def test_summary_empty(client: httpx.AsyncClient, auth_headers: dict):
    res = await client.get("/api/v1/dashboard/summary", headers=auth_headers)
    assert res.status_code == 200
    data = res.json()["data"]
    totals = data["totals"]
    assert Decimal(totals["total_income"]) == 0
    assert Decimal(totals["total_expense"]) == 0
    assert Decimal(totals["net_balance"]) == 0
    assert totals["savings_rate"] == 0
    assert totals["category_count"] == 0
    assert totals["transaction_count"] == 0
    assert data["monthly"] == []


async def test_summary_with_transactions(
    client: httpx.AsyncClient, auth_headers: dict, async_db: AsyncSession, test_user
):
    await _seed(async_db, test_user.id)

    res = await client.get("/api/v1/dashboard/summary", headers=auth_headers)
    assert res.status_code == 200
    data = res.json()["data"]

    totals = data["totals"]
    assert Decimal(totals["total_income"]) == Decimal("1000")
    assert Decimal(totals["total_expense"]) == Decimal("500")
    assert Decimal(totals["net_balance"]) == Decimal("500")
    assert totals["savings_rate"] == 50.0
    assert totals["category_count"] == 3
    assert totals["transaction_count"] == 3

    monthly = data["monthly"]
    assert [m["label"] for m in monthly] == ["jan 2024", "fev 2024"]
    assert [m["start"] for m in monthly] == ["2024-01-01", "2024-02-01"]
    assert [Decimal(m["balance"]) for m in monthly] == [Decimal("800"), Decimal("500")]


async def test_summary_with_dates(
    client: httpx.AsyncClient, auth_headers: dict, async_db: AsyncSession, test_user
):
    await _seed(async_db, test_user.id)

    res = await client.get(
        "/api/v1/dashboard/summary",
        headers=auth_headers,
        params={"date_from": "2024-02-01", "date_to": "2024-12-31"},
    )
    assert res.status_code == 200
    totals = res.json()["data"]["totals"]
    assert Decimal(totals["total_income"]) == 0
    assert Decimal(totals["total_expense"]) == Decimal("300")
    assert totals["savings_rate"] == 0


async def test_summary_rejects_inverted_range(client: httpx.AsyncClient, auth_headers: dict):
    res = await client.get(
        "/api/v1/dashboard/summary",
        headers=auth_headers,
        params={"date_from": "2024-03-01", "date_to": "2024-02-01"},
    )
    assert res.status_code == 422


async def test_summary_unauthorized(client: httpx.AsyncClient):
    res = await client.get("/api/v1/dashboard/summary")
    assert res.status_code == 401
