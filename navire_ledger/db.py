"""Database schema, record types and engine creation."""

from __future__ import annotations

import os
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

DATABASE_URL_VARIABLE = "DATABASE_URL"


class Base(DeclarativeBase):
    """Declarative base for the ledger tables."""


class ExpenseRecord(Base):
    """Row of the expenses table."""

    __tablename__ = "expenses"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class PaymentRecord(Base):
    """Row of the payments table."""

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    payment_type: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)


def establish_connection(db_url: str) -> Engine:
    """Create a pooled engine for the given database URL."""
    return create_engine(db_url)


def database_url() -> str:
    """Return the database URL from the environment."""
    url = os.environ.get(DATABASE_URL_VARIABLE)
    if not url:
        raise RuntimeError(f"{DATABASE_URL_VARIABLE} must be set")
    return url


def create_schema(engine: Engine) -> None:
    """Create the ledger tables if they do not exist yet."""
    Base.metadata.create_all(engine)