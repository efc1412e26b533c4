"""Domain models for exchange rates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(slots=True)
class ExchangeRate:
    from_currency: str
    to_currency: str
    rate: Decimal
    last_updated: datetime
