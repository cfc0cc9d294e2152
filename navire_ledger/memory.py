"""In-memory adapters for the event stream and repositories."""

from __future__ import annotations

from dataclasses import dataclass, field

from navire_ledger.domain import Expense, Payment
from navire_ledger.ports import EventStream, ExpenseRepository, PaymentRepository


@dataclass
class InMemoryEventStream(EventStream):
    """Keeps every sent event, in order."""

    events: list[str] = field(default_factory=list)

    async def send(self, event):
        self.events.append(event)


@dataclass
class InMemoryExpenseRepository(ExpenseRepository):
    """Keeps every stored expense, in order."""

    expenses: list[Expense] = field(default_factory=list)

    async def create(self, expense):
        self.expenses.append(expense)


@dataclass
class InMemoryPaymentRepository(PaymentRepository):
    """Keeps every stored payment, in order."""

    payments: list[Payment] = field(default_factory=list)

    async def create(self, payment):
        self.payments.append(payment)