"""Read-side query summarising expenses and payments."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from navire_ledger.db import (
    ExpenseRecord,
    PaymentRecord,
    database_url,
    establish_connection,
)

RECENT_PAYMENTS_LIMIT = 3


@dataclass(frozen=True)
class GetExpensesDataQuery:
    """Request for the ledger summary."""


@dataclass(frozen=True)
class PaymentSummary:
    """A payment as shown in the summary."""

    amount: int
    name: str
    email: str
    payment_type: str


@dataclass(frozen=True)
class TopContributor:
    """Total contributed by one person."""

    amount: int
    name: str


@dataclass(frozen=True)
class GetExpensesDataQueryResponse:
    """Totals, the latest payments and the contributors."""

    total_revenue: int
    total_expenses: int
    total_received: int
    payments: list[PaymentSummary] = field(default_factory=list)
    top_contributors: list[TopContributor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the response as plain JSON-ready data."""
        return asdict(self)


def _top_contributors(payments: list[PaymentRecord]) -> list[TopContributor]:
    """One entry per name, first seen first, summed over that payer's e-mail."""
    contributors: dict[str, TopContributor] = {}
    for payment in payments:
        if payment.name not in contributors:
            total = sum(p.amount for p in payments if p.email == payment.email)
            contributors[payment.name] = TopContributor(amount=total, name=payment.name)
    return list(contributors.values())


class GetExpensesDataQueryHandler:
    """Computes the ledger summary from the database."""

    def __init__(self, engine: Engine | None = None) -> None:
        if engine is None:
            engine = establish_connection(database_url())
        self.engine = engine

    async def execute(self, query: GetExpensesDataQuery) -> GetExpensesDataQueryResponse:
        latest_query = (
            select(PaymentRecord).order_by(PaymentRecord.date.desc()).limit(RECENT_PAYMENTS_LIMIT)
        )
        with Session(self.engine) as session:
            expenses = session.scalars(select(ExpenseRecord)).all()
            payments = list(session.scalars(select(PaymentRecord)))
            latest = session.scalars(latest_query).all()

        received = sum(p.amount for p in payments)
        return GetExpensesDataQueryResponse(
            total_revenue=received,
            total_expenses=sum(e.amount for e in expenses),
            total_received=received,
            payments=[
                PaymentSummary(p.amount, p.name, p.email, p.payment_type) for p in latest
            ],
            top_contributors=_top_contributors(payments),
        )