"""SQLAlchemy implementation of the currency catalog."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from exchange.infrastructure.database.models import Cryptocurrency
from exchange.modules.market.models import Currency


class SqlCurrencyRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_active(self) -> list[Currency]:
        stmt = select(Cryptocurrency).where(Cryptocurrency.is_active.is_(True)).order_by(Cryptocurrency.name)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def get_active(self, symbol: str) -> Currency | None:
        stmt = select(Cryptocurrency).where(
            Cryptocurrency.symbol == symbol,
            Cryptocurrency.is_active.is_(True),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def upsert(self, currency: Currency) -> None:
        model = await self._session.get(Cryptocurrency, currency.symbol)
        if model is None:
            model = Cryptocurrency(symbol=currency.symbol)
            self._session.add(model)
        model.name = currency.name
        model.decimal_places = currency.decimal_places
        model.is_active = currency.is_active
        await self._session.flush()

    @staticmethod
    def _to_domain(model: Cryptocurrency) -> Currency:
        return Currency(
            symbol=model.symbol,
            name=model.name,
            decimal_places=model.decimal_places,
            is_active=bool(model.is_active),
        )
