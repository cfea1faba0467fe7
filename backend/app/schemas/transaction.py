from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field

from app.models.transaction import TransactionType


class TransactionCreate(BaseModel):
    description: str = Field(min_length=2, max_length=255)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    type: TransactionType
    category: str = Field(min_length=2, max_length=100)
    date: dt.date


class TransactionUpdate(BaseModel):
    description: str | None = Field(None, min_length=2, max_length=255)
    amount: Decimal | None = Field(None, gt=0, max_digits=12, decimal_places=2)
    type: TransactionType | None = None
    category: str | None = Field(None, min_length=2, max_length=100)
    date: dt.date | None = None


class TransactionResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    description: str
    amount: Decimal
    type: TransactionType
    category: str
    date: dt.date
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class TransactionListResponse(BaseModel):
    data: list[TransactionResponse]
    total: int
