"""CLI for user management and reporting.

Usage:
    python -m app.cli create-user --email ana@example.com --password secret --name Ana
    python -m app.cli list-users
    python -m app.cli set-active --email ana@example.com --inactive
    python -m app.cli reset-password --email ana@example.com --password newpass
    python -m app.cli report --email ana@example.com [--month 2024-01] [--granularity monthly] [--type expense]
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from sqlalchemy import select

from app.config import settings
from app.database import sync_session_factory
from app.logging_config import configure_logging
from app.models import *  # noqa: F401, F403: ensure all models are loaded
from app.models.transaction import Transaction
from app.models.user import User
from app.schemas.transaction import TransactionResponse
from app.services.aggregation import (
    CategoryFilter,
    DateRange,
    Granularity,
    aggregate_by_category,
    bucket_transactions,
    filter_by_date_range,
    parse_month,
    summarize,
)
from app.services.auth_service import hash_password, normalize_email
from app.services.formatting import format_brl, format_percentage, period_label


def _find_user(db, email: str) -> User:
    user = db.execute(
        select(User).where(User.email == normalize_email(email))
    ).scalar_one_or_none()
    if user is None:
        print(f"Error: user '{email}' not found")
        sys.exit(1)
    return user


def create_user(args: argparse.Namespace) -> None:
    with sync_session_factory() as db:
        email = normalize_email(args.email)
        existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
        if existing is not None:
            print(f"Error: email '{email}' already exists")
            sys.exit(1)

        user = User(
            email=email,
            hashed_password=hash_password(args.password),
            display_name=args.name,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        print(f"Created user: {user.email} (id={user.id})")


def list_users(_args: argparse.Namespace) -> None:
    with sync_session_factory() as db:
        result = db.execute(select(User).order_by(User.created_at))
        users = result.scalars().all()

        if not users:
            print("No users found.")
            return

        print(f"{'ID':<38} {'Email':<32} {'Name':<20} {'Active':<8}")
        print("-" * 100)
        for u in users:
            print(
                f"{str(u.id):<38} {u.email:<32} {(u.display_name or '-'):<20} "
                f"{'yes' if u.is_active else 'no':<8}"
            )
        print(f"\nTotal: {len(users)} user(s)")


def set_active(args: argparse.Namespace) -> None:
    with sync_session_factory() as db:
        user = _find_user(db, args.email)
        user.is_active = not args.inactive
        db.commit()
        print(f"User '{user.email}' active={'yes' if user.is_active else 'no'}")


def reset_password(args: argparse.Namespace) -> None:
    with sync_session_factory() as db:
        user = _find_user(db, args.email)
        user.hashed_password = hash_password(args.password)
        db.commit()
        print(f"Password reset for user '{user.email}'")


def print_report(
    records: Sequence[TransactionResponse],
    date_range: DateRange,
    granularity: Granularity = Granularity.MONTHLY,
    type_filter: CategoryFilter = CategoryFilter.EXPENSE,
) -> None:
    """Print totals, a category breakdown and the balance evolution."""
    records = filter_by_date_range(records, date_range)
    totals = summarize(records)

    print(f"Período:          {period_label(date_range.start, date_range.end)}")
    print(f"Receitas:         {format_brl(totals.total_income)}")
    print(f"Despesas:         {format_brl(totals.total_expense)}")
    print(f"Saldo:            {format_brl(totals.net_balance)}")
    print(f"Taxa de economia: {format_percentage(totals.savings_rate)}")
    print(f"Categorias:       {totals.category_count}")

    categories = aggregate_by_category(records, type_filter)
    print(f"\nCategorias ({type_filter.value})")
    print("-" * 60)
    if not categories:
        print("Nenhuma transação encontrada")
    for c in categories:
        print(f"{c.name:<30} {format_brl(c.total):>18} {format_percentage(c.percentage):>9}")

    buckets = bucket_transactions(records, granularity)
    print(f"\nEvolução do saldo ({granularity.value})")
    print("-" * 80)
    if not buckets:
        print("Nenhuma transação encontrada")
    for b in buckets:
        print(
            f"{b.label:<10} {format_brl(b.income):>18} {format_brl(b.expense):>18} "
            f"{format_brl(b.balance):>18}"
        )


def report(args: argparse.Namespace) -> None:
    try:
        date_range = parse_month(args.month) if args.month else DateRange()
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    with sync_session_factory() as db:
        user = _find_user(db, args.email)
        rows = db.execute(
            select(Transaction)
            .where(Transaction.user_id == user.id)
            .order_by(Transaction.date.desc(), Transaction.created_at.desc())
        ).scalars().all()
        records = [TransactionResponse.model_validate(t) for t in rows]

    print_report(
        records,
        date_range,
        granularity=Granularity(args.granularity),
        type_filter=CategoryFilter(args.type),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="app.cli", description="Personal finance management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # create-user
    p_create = subparsers.add_parser("create-user", help="Create a new user")
    p_create.add_argument("--email", required=True)
    p_create.add_argument("--password", required=True)
    p_create.add_argument("--name", default=None)
    p_create.set_defaults(func=create_user)

    # list-users
    p_list = subparsers.add_parser("list-users", help="List all users")
    p_list.set_defaults(func=list_users)

    # set-active
    p_active = subparsers.add_parser("set-active", help="Activate or deactivate a user")
    p_active.add_argument("--email", required=True)
    p_active.add_argument("--inactive", action="store_true", default=False)
    p_active.set_defaults(func=set_active)

    # reset-password
    p_reset = subparsers.add_parser("reset-password", help="Reset a user's password")
    p_reset.add_argument("--email", required=True)
    p_reset.add_argument("--password", required=True)
    p_reset.set_defaults(func=reset_password)

    # report
    p_report = subparsers.add_parser("report", help="Print a user's finance report")
    p_report.add_argument("--email", required=True)
    p_report.add_argument("--month", default=None, help="YYYY-MM")
    p_report.add_argument(
        "--granularity",
        choices=[g.value for g in Granularity],
        default=Granularity.MONTHLY.value,
    )
    p_report.add_argument(
        "--type",
        choices=[c.value for c in CategoryFilter],
        default=CategoryFilter.EXPENSE.value,
    )
    p_report.set_defaults(func=report)

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    configure_logging(settings.LOG_LEVEL)
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
