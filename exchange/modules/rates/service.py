"""Exchange rate resolution: cache, then fresh persisted rate, then the price source."""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from exchange.core.timeutils import as_utc, utcnow
from exchange.infrastructure.database.repositories.rate_repository import SqlRateRepository

from .exceptions import RateNotFoundError, RateUnavailableError
from .mapping import cache_key, currency_external_id
from .models import ExchangeRate
from .repository import RateCache, RateSource

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300
DEFAULT_FRESHNESS = timedelta(minutes=5)


class RateService:
    """Resolves the rate between two currency codes.

    Lookup order, first success wins:

    1. the cache, keyed by ``rate:{from}:{to}``; entries expire on their own;
    2. the persisted rate when younger than the freshness window, which is
       then written back to the cache;
    3. the external price source, whose answer is upserted and cached.

    Concurrent refreshes of the same pair are not coordinated. The upsert is
    keyed by pair, so the last writer wins.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        cache: RateCache,
        source: RateSource,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        freshness: timedelta = DEFAULT_FRESHNESS,
    ) -> None:
        self._session_factory = session_factory
        self._cache = cache
        self._source = source
        self._ttl_seconds = ttl_seconds
        self._freshness = freshness

    async def get_rate(self, from_currency: str, to_currency: str) -> Decimal:
        key = cache_key(from_currency, to_currency)

        cached = await self._cache.get(key)
        if cached is not None:
            try:
                return Decimal(cached)
            except InvalidOperation:
                logger.warning("Ignoring malformed cached rate %r for %s", cached, key)

        async with self._session_factory() as session:
            stored = await SqlRateRepository(session).get_rate(from_currency, to_currency)
        if stored is not None and utcnow() - as_utc(stored.last_updated) < self._freshness:
            await self._cache.set(key, str(stored.rate), self._ttl_seconds)
            return stored.rate

        rate = await self._fetch(from_currency, to_currency)

        async with self._session_factory.begin() as session:
            await SqlRateRepository(session).upsert_rate(from_currency, to_currency, rate, utcnow())
        await self._cache.set(key, str(rate), self._ttl_seconds)
        logger.info("Refreshed rate %s/%s = %s", from_currency, to_currency, rate)
        return rate

    async def list_rates(self) -> list[ExchangeRate]:
        async with self._session_factory() as session:
            return list(await SqlRateRepository(session).list_rates())

    async def get_stored_rate(self, from_currency: str, to_currency: str) -> ExchangeRate:
        async with self._session_factory() as session:
            stored = await SqlRateRepository(session).get_rate(from_currency, to_currency)
        if stored is None:
            raise RateNotFoundError("Exchange rate not found")
        return stored

    async def _fetch(self, from_currency: str, to_currency: str) -> Decimal:
        from_id = currency_external_id(from_currency)
        to_id = currency_external_id(to_currency)
        rate = await self._source.fetch_rate(from_id, to_id)
        if rate is None or rate <= 0:
            raise RateUnavailableError(
                f"Exchange rate not available for {from_currency} to {to_currency}"
            )
        return rate
