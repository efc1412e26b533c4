"""Domain models for trade execution and history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(slots=True, frozen=True)
class TradeResult:
    transaction_id: str
    from_currency: str
    to_currency: str
    from_amount: Decimal
    to_amount: Decimal
    fee: Decimal
    exchange_rate: Decimal
    timestamp: datetime


@dataclass(slots=True)
class TransactionRecord:
    id: str
    user_id: str
    transaction_type: str
    from_currency: str
    to_currency: str
    from_amount: Decimal
    to_amount: Decimal
    fee: Decimal
    exchange_rate: Decimal
    created_at: datetime

