"""SQLAlchemy implementation for wallet domain"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from sqlalchemy import Row, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from exchange.infrastructure.database.models import (
    AuditLog,
    Cryptocurrency,
    Wallet as WalletModel,
)
from exchange.infrastructure.database.session import dialect_insert
from exchange.infrastructure.database.types import MONEY_CONTEXT
from exchange.modules.wallets.models import Wallet


class BalanceConflictError(RuntimeError):
    """A wallet balance changed between its locked read and the write."""


class SqlWalletRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_wallets(self, user_id: str) -> list[Wallet]:
        stmt = (
            select(WalletModel, Cryptocurrency.name)
            .join(Cryptocurrency, Cryptocurrency.symbol == WalletModel.currency)
            .where(WalletModel.user_id == user_id)
            .order_by(WalletModel.currency)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model, name) for model, name in result.all()]

    async def get_wallet(self, user_id: str, currency: str) -> Wallet | None:
        stmt = (
            select(WalletModel, Cryptocurrency.name)
            .join(Cryptocurrency, Cryptocurrency.symbol == WalletModel.currency)
            .where(WalletModel.user_id == user_id, WalletModel.currency == currency)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        return self._to_domain(row[0], row[1])

    async def lock_wallet(self, user_id: str, currency: str) -> Wallet | None:
        stmt = (
            select(WalletModel)
            .where(WalletModel.user_id == user_id, WalletModel.currency == currency)
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model is not None else None

    async def create_wallet(self, user_id: str, currency: str, balance: Decimal = Decimal("0")) -> Wallet:
        wallet = WalletModel(user_id=user_id, currency=currency, balance=balance)
        self.session.add(wallet)
        await self.session.flush()
        await self.session.refresh(wallet)
        return self._to_domain(wallet)

    async def debit(self, user_id: str, currency: str, amount: Decimal) -> Decimal | None:
        row = await self._locked_balance(user_id, currency)
        if row is None or row.balance < amount:
            return None
        balance = MONEY_CONTEXT.subtract(row.balance, amount)
        await self._swap_balance(row.id, row.balance, balance)
        return balance

    async def credit(self, user_id: str, currency: str, amount: Decimal) -> Decimal:
        insert = dialect_insert(self.session)
        stmt = (
            insert(WalletModel)
            .values(user_id=user_id, currency=currency, balance=Decimal("0"))
            .on_conflict_do_nothing(index_elements=[WalletModel.user_id, WalletModel.currency])
        )
        await self.session.execute(stmt)

        row = await self._locked_balance(user_id, currency)
        balance = MONEY_CONTEXT.add(row.balance, amount)
        await self._swap_balance(row.id, row.balance, balance)
        return balance

    async def _locked_balance(self, user_id: str, currency: str) -> Row | None:
        stmt = (
            select(WalletModel.id, WalletModel.balance)
            .where(WalletModel.user_id == user_id, WalletModel.currency == currency)
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return result.first()

    async def _swap_balance(self, wallet_id: str, expected: Decimal, balance: Decimal) -> None:
        # Compare-and-set on the value just read. SQLite has no row locks, so
        # this is what stops a concurrent writer's update from being lost.
        stmt = (
            update(WalletModel)
            .where(WalletModel.id == wallet_id, WalletModel.balance == expected)
            .values(balance=balance)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            raise BalanceConflictError(f"Wallet {wallet_id} changed during the update")

    async def add_audit_log(
        self,
        *,
        user_id: str,
        action: str,
        entity_type: str,
        entity_id: str | None,
        new_values: dict[str, Any] | None,
    ) -> None:
        entry = AuditLog(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            new_values=json.dumps(new_values) if new_values is not None else None,
        )
        self.session.add(entry)
        await self.session.flush()

    @staticmethod
    def _to_domain(model: WalletModel, currency_name: str | None = None) -> Wallet:
        return Wallet(
            id=model.id,
            user_id=model.user_id,
            currency=model.currency,
            balance=model.balance if model.balance is not None else Decimal("0"),
            currency_name=currency_name,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
