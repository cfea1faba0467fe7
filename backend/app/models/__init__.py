from __future__ import annotations

from app.models.transaction import Transaction, TransactionType
from app.models.user import User

__all__ = [
    "Transaction",
    "TransactionType",
    "User",
]
