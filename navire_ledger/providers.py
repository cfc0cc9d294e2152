"""Date and identifier providers, fixed and real."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from navire_ledger.ports import DateProvider, IdProvider


@dataclass(frozen=True)
class FixedDateProvider(DateProvider):
    """Always returns the same date."""

    date: str = "2021-01-01"

    def now(self) -> str:
        return self.date


@dataclass(frozen=True)
class FixedIdProvider(IdProvider):
    """Always returns the same identifier."""

    identifier: str = "123"

    def generate(self) -> str:
        return self.identifier


class RealDateProvider(DateProvider):
    """Current UTC time in RFC 3339 form."""

    def now(self) -> str:
        return datetime.now(timezone.utc).isoformat()


class RealIdProvider(IdProvider):
    """Random version 4 UUIDs."""

    def generate(self) -> str:
        return str(uuid.uuid4())