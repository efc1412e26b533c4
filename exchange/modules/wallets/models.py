"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

# Counted 1:1 against USD when aggregating balances.
STABLECOINS = frozenset({"USD", "USDT", "USDC"})


@dataclass(slots=True)
class Wallet:
    id: str
    user_id: str
    currency: str
    balance: Decimal
    currency_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
