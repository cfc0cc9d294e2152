"""Commands that change the ledger and their handlers."""

from __future__ import annotations

from dataclasses import dataclass

from navire_ledger.domain import Amount, Expense, Payment
from navire_ledger.ports import (
    DateProvider,
    EventStream,
    ExpenseRepository,
    IdProvider,
    PaymentRepository,
)


@dataclass(frozen=True)
class AddExpenseCommand:
    """Request to record an expense."""

    amount: float


@dataclass
class AddExpenseHandler:
    """Records an expense and announces it on the event stream."""

    repository: ExpenseRepository
    id_provider: IdProvider
    date_provider: DateProvider
    event_stream: EventStream

    async def execute(self, command: AddExpenseCommand) -> None:
        """Store the expense; raise InvalidAmountError for a negative amount."""
        amount = Amount(command.amount)
        expense = Expense(
            id=self.id_provider.generate(),
            amount=amount,
            date=self.date_provider.now(),
        )
        await self.repository.create(expense)
        await self.event_stream.send("expense-added")


@dataclass(frozen=True)
class ReceivePaymentCommand:
    """Request to record a received payment."""

    amount: float
    name: str
    email: str
    payment_type: str


@dataclass
class ReceivePaymentHandler:
    """Records a payment together with the VAT expense it implies."""

    TVA_RATE = 0.2

    payment_repository: PaymentRepository
    id_provider: IdProvider
    date_provider: DateProvider
    expense_repository: ExpenseRepository
    event_stream: EventStream

    async def execute(self, command: ReceivePaymentCommand) -> None:
        """Store the payment and its VAT expense; raise InvalidAmountError if negative."""
        payment = self._create_payment(command)
        await self.payment_repository.create(payment)

        expense = self._create_default_tva_expense(command)
        await self.expense_repository.create(expense)
        await self.event_stream.send("payment-received")

    def _create_payment(self, command: ReceivePaymentCommand) -> Payment:
        identifier = self.id_provider.generate()
        amount = Amount(command.amount)
        return Payment(
            id=identifier,
            amount=amount,
            name=command.name,
            email=command.email,
            payment_type=command.payment_type,
            date=self.date_provider.now(),
        )

    def _create_default_tva_expense(self, command: ReceivePaymentCommand) -> Expense:
        identifier = self.id_provider.generate()
        amount = Amount(command.amount * self.TVA_RATE)
        return Expense(id=identifier, amount=amount, date=self.date_provider.now())