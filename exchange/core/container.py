"""Application context: owns every long-lived resource and the services built on them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

import httpx
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from exchange.core.config import Settings
from exchange.infrastructure.cache import RedisRateCache
from exchange.infrastructure.database.session import build_engine, build_session_factory
from exchange.infrastructure.rates import CoinGeckoRateSource
from exchange.modules.market.service import MarketService
from exchange.modules.rates.repository import RateCache, RateSource
from exchange.modules.rates.service import RateService
from exchange.modules.trading.service import TradingService
from exchange.modules.wallets.service import WalletService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplicationContainer:
    """Built once per process (or per test) and passed explicitly.

    Nothing in the application reaches for module-level engines, caches or
    HTTP clients; everything comes from here.
    """

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    rates: RateService
    wallets: WalletService
    trading: TradingService
    market: MarketService
    redis: Redis | None = None
    http_client: httpx.AsyncClient | None = None

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        cache: RateCache | None = None,
        source: RateSource | None = None,
    ) -> "ApplicationContainer":
        """Wire the production graph; ``cache`` and ``source`` override the defaults."""
        engine = build_engine(settings)
        session_factory = build_session_factory(engine)

        redis_client: Redis | None = None
        if cache is None:
            if settings.redis.enabled:
                redis_client = Redis.from_url(settings.redis.url)
            cache = RedisRateCache(redis_client)

        http_client: httpx.AsyncClient | None = None
        if source is None:
            http_client = httpx.AsyncClient(timeout=settings.rates.timeout)
            source = CoinGeckoRateSource(http_client, settings.rates.api_url, settings.rates.api_key)

        rates = RateService(
            session_factory,
            cache,
            source,
            ttl_seconds=settings.rate_ttl_seconds,
            freshness=timedelta(seconds=settings.rates.freshness_seconds),
        )
        return cls(
            settings=settings,
            engine=engine,
            session_factory=session_factory,
            rates=rates,
            wallets=WalletService(session_factory, rates),
            trading=TradingService(
                session_factory,
                rates,
                fee_rate=settings.fee_rate,
                lock_timeout_seconds=settings.trading.lock_timeout_seconds,
            ),
            market=MarketService(session_factory),
            redis=redis_client,
            http_client=http_client,
        )

    async def close(self) -> None:
        """Release pools and clients; the container is unusable afterwards."""
        if self.http_client is not None:
            await self.http_client.aclose()
        if self.redis is not None:
            await self.redis.aclose()
        await self.engine.dispose()
        logger.debug("Application container closed")


__all__ = ["ApplicationContainer"]
