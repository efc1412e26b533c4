"""Rate lookup order: cache, fresh stored rate, external source."""

from datetime import timedelta
from decimal import Decimal

import pytest

from exchange.core.timeutils import as_utc, utcnow
from exchange.infrastructure.database.repositories.rate_repository import SqlRateRepository
from exchange.modules.rates import RateNotFoundError, RateUnavailableError


async def store_rate(container, from_currency, to_currency, rate, age):
    async with container.session_factory.begin() as session:
        await SqlRateRepository(session).upsert_rate(
            from_currency, to_currency, Decimal(rate), utcnow() - age
        )


class TestCacheFirst:
    @pytest.mark.asyncio
    async def test_cache_hit_skips_store_and_source(self, container, cache, price_api) -> None:
        cache.put_rate("BTC", "USD", "50000")
        await store_rate(container, "BTC", "USD", "1", timedelta(seconds=1))

        assert await container.rates.get_rate("BTC", "USD") == Decimal("50000")
        assert price_api.requests == []

    @pytest.mark.asyncio
    async def test_malformed_cache_entry_falls_through(self, container, cache, price_api) -> None:
        cache.put_rate("BTC", "USD", "not-a-number")
        price_api.quotes[("bitcoin", "usd")] = 42000

        assert await container.rates.get_rate("BTC", "USD") == Decimal("42000")
        assert cache.data["rate:BTC:USD"] == "42000"


class TestStoredRate:
    @pytest.mark.asyncio
    async def test_fresh_stored_rate_is_used_and_cached(self, container, cache, price_api) -> None:
        await store_rate(container, "ETH", "USD", "3000.5", timedelta(minutes=4))

        rate = await container.rates.get_rate("ETH", "USD")

        assert rate == Decimal("3000.5")
        assert Decimal(cache.data["rate:ETH:USD"]) == Decimal("3000.5")
        assert cache.ttls["rate:ETH:USD"] == 300
        assert price_api.requests == []

    @pytest.mark.asyncio
    async def test_stale_stored_rate_is_refreshed(self, container, cache, price_api) -> None:
        await store_rate(container, "ETH", "USD", "2000", timedelta(minutes=6))
        price_api.quotes[("ethereum", "usd")] = 3100.25

        rate = await container.rates.get_rate("ETH", "USD")

        assert rate == Decimal("3100.25")
        assert len(price_api.requests) == 1
        stored = await container.rates.get_stored_rate("ETH", "USD")
        assert stored.rate == Decimal("3100.25")
        assert utcnow() - as_utc(stored.last_updated) < timedelta(minutes=1)


class TestExternalFetch:
    @pytest.mark.asyncio
    async def test_fetch_uses_mapped_ids_and_persists(self, container, cache, price_api) -> None:
        price_api.quotes[("bitcoin", "ethereum")] = 16.67

        rate = await container.rates.get_rate("BTC", "ETH")

        assert rate == Decimal("16.67")
        request = price_api.requests[0]
        assert request.url.path.endswith("/simple/price")
        assert request.url.params["ids"] == "bitcoin"
        assert request.url.params["vs_currencies"] == "ethereum"
        assert cache.data["rate:BTC:ETH"] == "16.67"
        rates = await container.rates.list_rates()
        assert [(r.from_currency, r.to_currency, r.rate) for r in rates] == [("BTC", "ETH", Decimal("16.67"))]

    @pytest.mark.asyncio
    async def test_second_lookup_is_served_from_cache(self, container, price_api) -> None:
        price_api.quotes[("solana", "usd")] = 150

        await container.rates.get_rate("SOL", "USD")
        await container.rates.get_rate("SOL", "USD")

        assert len(price_api.requests) == 1

    @pytest.mark.asyncio
    async def test_missing_quote_is_unavailable(self, container, cache) -> None:
        with pytest.raises(RateUnavailableError):
            await container.rates.get_rate("BTC", "ZZZ")
        assert "rate:BTC:ZZZ" not in cache.data

    @pytest.mark.asyncio
    async def test_non_positive_quote_is_unavailable(self, container, price_api) -> None:
        price_api.quotes[("bitcoin", "usd")] = 0
        with pytest.raises(RateUnavailableError):
            await container.rates.get_rate("BTC", "USD")

    @pytest.mark.asyncio
    async def test_source_error_is_unavailable(self, container, price_api) -> None:
        price_api.status_code = 503
        with pytest.raises(RateUnavailableError):
            await container.rates.get_rate("BTC", "USD")

    @pytest.mark.asyncio
    async def test_tiny_rate_survives_storage(self, container, cache, price_api) -> None:
        price_api.quotes[("shib", "bitcoin")] = 1.2e-10

        first = await container.rates.get_rate("SHIB", "BTC")
        stored = await container.rates.get_stored_rate("SHIB", "BTC")
        cache.data.clear()
        second = await container.rates.get_rate("SHIB", "BTC")

        assert first == Decimal("1.2E-10")
        assert stored.rate == first
        assert second == first
        assert len(price_api.requests) == 1


class TestStoredRateQueries:
    @pytest.mark.asyncio
    async def test_missing_stored_rate(self, container) -> None:
        with pytest.raises(RateNotFoundError):
            await container.rates.get_stored_rate("BTC", "USD")

    @pytest.mark.asyncio
    async def test_rates_are_listed_by_pair(self, container) -> None:
        await store_rate(container, "ETH", "USD", "3000", timedelta(0))
        await store_rate(container, "BTC", "USD", "50000", timedelta(0))
        await store_rate(container, "BTC", "ETH", "16", timedelta(0))

        pairs = [(r.from_currency, r.to_currency) for r in await container.rates.list_rates()]

        assert pairs == [("BTC", "ETH"), ("BTC", "USD"), ("ETH", "USD")]

    @pytest.mark.asyncio
    async def test_upsert_replaces_existing_pair(self, container) -> None:
        await store_rate(container, "BTC", "USD", "50000", timedelta(0))
        await store_rate(container, "BTC", "USD", "51000", timedelta(0))

        rates = await container.rates.list_rates()

        assert len(rates) == 1
        assert rates[0].rate == Decimal("51000")
