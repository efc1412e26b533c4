"""Repository protocol for wallet operations."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Protocol, Sequence

from .models import Wallet


class WalletRepository(Protocol):
    async def list_wallets(self, user_id: str) -> Sequence[Wallet]:
        ...

    async def get_wallet(self, user_id: str, currency: str) -> Wallet | None:
        ...

    async def lock_wallet(self, user_id: str, currency: str) -> Wallet | None:
        """Read the wallet row holding a row lock until the transaction ends."""
        ...

    async def create_wallet(self, user_id: str, currency: str, balance: Decimal = Decimal("0")) -> Wallet:
        ...

    async def debit(self, user_id: str, currency: str, amount: Decimal) -> Decimal | None:
        """Subtract ``amount`` only if the balance covers it; return the new balance."""
        ...

    async def credit(self, user_id: str, currency: str, amount: Decimal) -> Decimal:
        """Add ``amount``, creating the wallet when missing; return the new balance."""
        ...

    async def add_audit_log(
        self,
        *,
        user_id: str,
        action: str,
        entity_type: str,
        entity_id: str | None,
        new_values: dict[str, Any] | None,
    ) -> None:
        ...
