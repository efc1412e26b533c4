"""Shared fixtures: an isolated container over a temporary SQLite file.

The redis cache is replaced by an in-memory double and the price source talks
to an ``httpx.MockTransport`` so no test leaves the process.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio

from exchange.core.config import Settings
from exchange.core.container import ApplicationContainer
from exchange.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from exchange.infrastructure.database.session import init_db
from exchange.infrastructure.rates import CoinGeckoRateSource
from exchange.modules.accounts import UserCreateInput
from exchange.modules.accounts.service import AccountService
from exchange.modules.rates import cache_key

PRICE_API_URL = "https://prices.test/api/v3"


class FakeCache:
    """Dict-backed stand-in for the redis rate cache."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.gets: list[str] = []

    async def get(self, key: str) -> str | None:
        self.gets.append(key)
        return self.data.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.data[key] = value
        self.ttls[key] = ttl_seconds

    def put_rate(self, from_currency: str, to_currency: str, rate: str) -> None:
        self.data[cache_key(from_currency, to_currency)] = rate


class FakePriceApi:
    """Serves ``/simple/price`` from a ``{(from_id, to_id): quote}`` table."""

    def __init__(self) -> None:
        self.quotes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []
        self.status_code = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "unavailable"})
        from_id = request.url.params["ids"]
        to_id = request.url.params["vs_currencies"]
        payload: dict[str, dict[str, Any]] = {}
        if (from_id, to_id) in self.quotes:
            payload[from_id] = {to_id: self.quotes[(from_id, to_id)]}
        return httpx.Response(200, json=payload)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        environment="test",
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'exchange.db'}"},
        redis={"enabled": False},
        security={"secret_key": "test-secret-key", "bcrypt_rounds": 4},
    )


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def price_api() -> FakePriceApi:
    return FakePriceApi()


@pytest_asyncio.fixture
async def http_client(price_api: FakePriceApi):
    client = httpx.AsyncClient(transport=httpx.MockTransport(price_api.handler))
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def container(settings: Settings, cache: FakeCache, http_client: httpx.AsyncClient):
    source = CoinGeckoRateSource(http_client, PRICE_API_URL)
    container = ApplicationContainer.build(settings, cache=cache, source=source)
    await init_db(container.engine)
    await container.market.seed_currencies()
    yield container
    await container.close()


@pytest.fixture
def register_user(container: ApplicationContainer):
    """Register an account directly through the service; returns its id."""

    async def _register(email: str = "trader@example.com") -> str:
        async with container.session_factory.begin() as session:
            service = AccountService.with_session(session, container.settings)
            result = await service.register(
                UserCreateInput(email=email, password="Secret123!", first_name="Test", last_name="Trader")
            )
        return result.user.id

    return _register


@pytest.fixture
def set_balance(container: ApplicationContainer):
    """Force a wallet balance, creating the wallet when missing."""

    async def _set(user_id: str, currency: str, amount: Decimal) -> None:
        async with container.session_factory.begin() as session:
            wallets = SqlWalletRepository(session)
            wallet = await wallets.get_wallet(user_id, currency)
            current = wallet.balance if wallet is not None else Decimal("0")
            await wallets.credit(user_id, currency, amount - current)

    return _set


@pytest_asyncio.fixture
async def user_id(register_user) -> str:
    return await register_user()
