"""Interfaces the application layer depends on."""

from __future__ import annotations

from abc import ABC, abstractmethod

from navire_ledger.domain import Expense, Payment


class DateProvider(ABC):
    """Source of the current date as text."""

    @abstractmethod
    def now(self) -> str: ...


class IdProvider(ABC):
    """Source of fresh identifiers."""

    @abstractmethod
    def generate(self) -> str: ...


class EventStream(ABC):
    """Channel on which ledger activity events are published."""

    @abstractmethod
    async def send(self, event: str) -> None: ...


class ExpenseRepository(ABC):
    """Storage for expenses."""

    @abstractmethod
    async def create(self, expense: Expense) -> None: ...


class PaymentRepository(ABC):
    """Storage for payments."""

    @abstractmethod
    async def create(self, payment: Payment) -> None: ...