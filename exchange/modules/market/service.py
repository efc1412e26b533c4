"""Currency catalog service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from exchange.infrastructure.database.repositories.currency_repository import SqlCurrencyRepository

from .models import DEFAULT_CURRENCIES, Currency


@dataclass(slots=True)
class MarketService:
    session_factory: async_sessionmaker[AsyncSession]

    async def list_currencies(self) -> list[Currency]:
        async with self.session_factory() as session:
            return await SqlCurrencyRepository(session).list_active()

    async def seed_currencies(self, currencies: Iterable[Currency] = DEFAULT_CURRENCIES) -> int:
        """Insert or refresh catalog entries; returns how many were written."""
        count = 0
        async with self.session_factory.begin() as session:
            repository = SqlCurrencyRepository(session)
            for currency in currencies:
                await repository.upsert(currency)
                count += 1
        return count
