"""Repositories that store expenses and payments in a SQL database."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from navire_ledger.db import (
    ExpenseRecord,
    PaymentRecord,
    database_url,
    establish_connection,
)
from navire_ledger.ports import ExpenseRepository, PaymentRepository

DATE_FORMAT = "%Y-%m-%d"
_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)


def parse_date(value: str, fallback: datetime) -> datetime:
    """Parse a YYYY-MM-DD date, returning fallback when it does not match."""
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return fallback


def _to_int64(value: float) -> int:
    """Saturating float-to-int64 conversion; NaN becomes 0."""
    if math.isnan(value):
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(value) if math.isfinite(value) else (
        _INT64_MAX if value > 0 else _INT64_MIN
    )))


class _SqlRepository:
    """Shared engine handling and insertion for the SQL repositories."""

    def __init__(self, engine: Engine | None = None) -> None:
        self.engine = engine if engine is not None else establish_connection(database_url())

    def _insert(self, record_type: type, *, amount: float, date: str, **values: Any) -> None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        record = record_type(
            amount=_to_int64(amount),
            date=parse_date(date, now),
            created_at=now,
            updated_at=now,
            **values,
        )
        with Session(self.engine) as session, session.begin():
            session.add(record)


class SqlExpenseRepository(_SqlRepository, ExpenseRepository):
    """Stores expenses in the expenses table."""

    async def create(self, expense):
        self._insert(
            ExpenseRecord, id=expense.id, amount=expense.amount.value, date=expense.date
        )


class SqlPaymentRepository(_SqlRepository, PaymentRepository):
    """Stores payments in the payments table."""

    async def create(self, payment):
        self._insert(
            PaymentRecord,
            id=payment.id,
            amount=payment.amount.value,
            date=payment.date,
            name=payment.name,
            email=payment.email,
            payment_type=payment.payment_type,
        )