"""SQLAlchemy implementation for the transaction ledger"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from exchange.infrastructure.database.models import Transaction as TransactionModel
from exchange.modules.trading.models import TransactionRecord


class SqlTransactionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add_transaction(
        self,
        *,
        user_id: str,
        from_currency: str,
        to_currency: str,
        from_amount: Decimal,
        to_amount: Decimal,
        fee: Decimal,
        exchange_rate: Decimal,
        created_at: datetime,
    ) -> str:
        stmt = (
            insert(TransactionModel)
            .values(
                user_id=user_id,
                transaction_type="exchange",
                from_currency=from_currency,
                to_currency=to_currency,
                from_amount=from_amount,
                to_amount=to_amount,
                fee=fee,
                exchange_rate=exchange_rate,
                created_at=created_at,
            )
            .returning(TransactionModel.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def list_for_user(self, user_id: str, *, limit: int, offset: int) -> list[TransactionRecord]:
        stmt = (
            select(TransactionModel)
            .where(TransactionModel.user_id == user_id)
            .order_by(TransactionModel.created_at.desc(), TransactionModel.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def get_for_user(self, user_id: str, transaction_id: str) -> TransactionRecord | None:
        stmt = select(TransactionModel).where(
            TransactionModel.id == transaction_id,
            TransactionModel.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model is not None else None

    @staticmethod
    def _to_domain(model: TransactionModel) -> TransactionRecord:
        return TransactionRecord(
            id=model.id,
            user_id=model.user_id,
            transaction_type=model.transaction_type,
            from_currency=model.from_currency,
            to_currency=model.to_currency,
            from_amount=model.from_amount,
            to_amount=model.to_amount,
            fee=model.fee,
            exchange_rate=model.exchange_rate,
            created_at=model.created_at,
        )
