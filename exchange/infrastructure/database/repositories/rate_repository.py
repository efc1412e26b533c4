"""SQLAlchemy implementation of persisted exchange rates."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from exchange.infrastructure.database.models import ExchangeRate as ExchangeRateModel
from exchange.infrastructure.database.session import dialect_insert
from exchange.modules.rates.models import ExchangeRate


class SqlRateRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_rate(self, from_currency: str, to_currency: str) -> ExchangeRate | None:
        stmt = select(ExchangeRateModel).where(
            ExchangeRateModel.from_currency == from_currency,
            ExchangeRateModel.to_currency == to_currency,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def list_rates(self) -> list[ExchangeRate]:
        stmt = select(ExchangeRateModel).order_by(
            ExchangeRateModel.from_currency,
            ExchangeRateModel.to_currency,
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def upsert_rate(
        self,
        from_currency: str,
        to_currency: str,
        rate: Decimal,
        last_updated: datetime,
    ) -> None:
        stmt = dialect_insert(self._session)(ExchangeRateModel).values(
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            last_updated=last_updated,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ExchangeRateModel.from_currency, ExchangeRateModel.to_currency],
            set_={"rate": stmt.excluded.rate, "last_updated": stmt.excluded.last_updated},
        )
        await self._session.execute(stmt)

    @staticmethod
    def _to_domain(model: ExchangeRateModel) -> ExchangeRate:
        return ExchangeRate(
            from_currency=model.from_currency,
            to_currency=model.to_currency,
            rate=model.rate,
            last_updated=model.last_updated,
        )
