"""Domain model of the ledger: amounts, expenses and payments."""

from __future__ import annotations

from dataclasses import dataclass


class InvalidAmountError(ValueError):
    """Raised when an amount does not satisfy the domain rules."""


@dataclass(frozen=True)
class Amount:
    """A non-negative monetary amount."""

    value: float

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise InvalidAmountError if the amount is negative."""
        if self.value < 0.0:
            raise InvalidAmountError("Amount must be positive")


@dataclass
class Expense:
    """Money going out of the ledger."""

    id: str
    amount: Amount
    date: str


@dataclass
class Payment:
    """Money received from a contributor."""

    id: str
    amount: Amount
    name: str
    email: str
    payment_type: str
    date: str